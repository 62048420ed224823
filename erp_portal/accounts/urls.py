from django.urls import path
from .views import (
    recalculate_detail_rows, adjustment_totals, recalculate_adjustment,
    auto_allocation, manual_allocation, reset_allocations,
    exchange_rate, gst_percentage, due_date, period_closed, address_contact
)

urlpatterns = [
    # Calculation endpoints
    path('accounts/details/recalculate/', recalculate_detail_rows, name='account-details-recalculate'),
    path('accounts/adjustments/totals/', adjustment_totals, name='account-adjustment-totals'),
    path('accounts/adjustments/recalculate/', recalculate_adjustment, name='account-adjustment-recalculate'),

    # Allocation endpoints
    path('accounts/allocations/auto/', auto_allocation, name='account-allocation-auto'),
    path('accounts/allocations/manual/', manual_allocation, name='account-allocation-manual'),
    path('accounts/allocations/reset/', reset_allocations, name='account-allocation-reset'),

    # Backend lookups
    path('accounts/exchange-rate/', exchange_rate, name='account-exchange-rate'),
    path('accounts/gst-percentage/', gst_percentage, name='account-gst-percentage'),
    path('accounts/due-date/', due_date, name='account-due-date'),
    path('accounts/period-closed/', period_closed, name='account-period-closed'),
    path('accounts/address-contact/<str:entity>/<int:entity_id>/', address_contact, name='account-address-contact'),
]
