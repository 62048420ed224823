from django.apps import AppConfig


class DashboardConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'erp_portal.dashboard'
    verbose_name = 'Dashboard'
