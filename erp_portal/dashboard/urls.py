from django.urls import path
from .views import procurement_spend, financial_kpis, receivables_aging, sales_performance

urlpatterns = [
    path('dashboard/procurement-spend/', procurement_spend, name='dashboard-procurement-spend'),
    path('dashboard/financial-kpis/', financial_kpis, name='dashboard-financial-kpis'),
    path('dashboard/receivables-aging/', receivables_aging, name='dashboard-receivables-aging'),
    path('dashboard/sales-performance/', sales_performance, name='dashboard-sales-performance'),
]
