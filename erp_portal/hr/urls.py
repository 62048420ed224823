from django.urls import path
from .views import validate_schema, leave_requests, bulk_leave_action, leave_days, leave_summary

urlpatterns = [
    path('hr/validate/<str:schema>/', validate_schema, name='hr-validate'),
    path('hr/leave-requests/', leave_requests, name='hr-leave-requests'),
    path('hr/leave-requests/bulk-action/', bulk_leave_action, name='hr-leave-bulk-action'),
    path('hr/leave-days/', leave_days, name='hr-leave-days'),
    path('hr/leave-summary/', leave_summary, name='hr-leave-summary'),
]
