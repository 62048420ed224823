from django.urls import path
from .views import (
    audit_log_list, audit_log_detail,
    decimal_settings, mandatory_fields, visible_fields
)

urlpatterns = [
    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),

    # Tenant setting endpoints
    path('settings/decimals/', decimal_settings, name='decimal-settings'),
    path('settings/mandatory-fields/<int:module_id>/<int:transaction_id>/', mandatory_fields, name='mandatory-fields'),
    path('settings/visible-fields/<int:module_id>/<int:transaction_id>/', visible_fields, name='visible-fields'),
]
