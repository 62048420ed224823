from django.apps import AppConfig


class DatagridConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'erp_portal.datagrid'
    verbose_name = 'Data Grid'

    def ready(self):
        """Import signals when app is ready"""
        import erp_portal.datagrid.signals  # noqa: F401
