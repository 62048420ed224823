from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'erp_portal.accounts'
    verbose_name = 'Account Calculations'
