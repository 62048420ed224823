from django.urls import path
from .views import grid_layout, query_table, edit_cell, reorder

urlpatterns = [
    path('datagrid/layouts/<int:module_id>/<int:transaction_id>/<str:grid_name>/', grid_layout, name='grid-layout'),
    path('datagrid/query/', query_table, name='datagrid-query'),
    path('datagrid/edit/', edit_cell, name='datagrid-edit'),
    path('datagrid/reorder/', reorder, name='datagrid-reorder'),
]
