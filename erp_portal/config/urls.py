"""
URL configuration for the ERP portal service.

Every local API lives under /api/v1/; /api/proxy/ forwards anything else to the
ERP backend.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "ERP Portal Admin Panel"
admin.site.site_title = "ERP Portal Admin"
admin.site.index_title = "ERP Portal administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('erp_portal.core.urls')),
    path('api/v1/', include('erp_portal.accounts.urls')),
    path('api/v1/', include('erp_portal.datagrid.urls')),
    path('api/v1/', include('erp_portal.dashboard.urls')),
    path('api/v1/', include('erp_portal.hr.urls')),
    path('api/v1/', include('erp_portal.operations.urls')),
    path('api/proxy/', include('erp_portal.proxy.urls')),
]
