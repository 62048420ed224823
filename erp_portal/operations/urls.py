from django.urls import path
from .views import validate_schema, save_checklist

urlpatterns = [
    path('operations/validate/<str:schema>/', validate_schema, name='operations-validate'),
    path('operations/<str:schema>/save/', save_checklist, name='operations-save'),
]
