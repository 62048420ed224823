import django_filters
from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    """Filter for AuditLog using django-filter"""

    action = django_filters.CharFilter(field_name='action', lookup_expr='exact')
    model = django_filters.CharFilter(field_name='model_name', lookup_expr='iexact')
    user = django_filters.CharFilter(field_name='user_id', lookup_expr='exact')
    reference = django_filters.CharFilter(field_name='object_reference', lookup_expr='icontains')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['action', 'model', 'user', 'reference', 'date_from', 'date_to']
