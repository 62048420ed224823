"""
Django management command to drop cached tenant settings and dashboard data.

Usage:
    python manage.py clear_portal_cache
    python manage.py clear_portal_cache --only tenant
"""
from django.core.management.base import BaseCommand

from erp_portal.core.cache_utils import invalidate_dashboard_cache, invalidate_tenant_settings_cache


class Command(BaseCommand):
    help = 'Clear cached tenant settings (decimals, mandatory/visible fields) and dashboard data'

    def add_arguments(self, parser):
        parser.add_argument(
            '--only',
            choices=['tenant', 'dashboard'],
            help='Clear only one group of cached data',
        )

    def handle(self, *args, **options):
        only = options.get('only')

        if only in (None, 'tenant'):
            invalidate_tenant_settings_cache()
            self.stdout.write(self.style.SUCCESS("Tenant settings cache cleared"))

        if only in (None, 'dashboard'):
            invalidate_dashboard_cache()
            self.stdout.write(self.style.SUCCESS("Dashboard cache cleared"))
