from django.contrib import admin
from .models import GridLayout


@admin.register(GridLayout)
class GridLayoutAdmin(admin.ModelAdmin):
    list_display = ['grid_name', 'module_id', 'transaction_id', 'user_id', 'company_id', 'page_size', 'updated_at']
    list_filter = ['module_id', 'transaction_id', 'page_size']
    search_fields = ['grid_name', 'user_id', 'company_id']
    ordering = ['company_id', 'user_id', 'grid_name']
