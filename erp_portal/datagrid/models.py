from django.db import models

from .table import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS


class GridLayout(models.Model):
    """Saved column layout of one grid for one user in one company"""
    user_id = models.CharField(max_length=50)
    company_id = models.CharField(max_length=50)
    module_id = models.PositiveIntegerField()
    transaction_id = models.PositiveIntegerField()
    grid_name = models.CharField(max_length=100)
    sort = models.JSONField(default=list, blank=True, help_text="List of {id, desc} sort entries")
    column_visibility = models.JSONField(default=dict, blank=True)
    column_sizing = models.JSONField(default=dict, blank=True)
    column_order = models.JSONField(default=list, blank=True)
    page_size = models.PositiveIntegerField(
        default=DEFAULT_PAGE_SIZE,
        choices=[(size, str(size)) for size in PAGE_SIZE_OPTIONS],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.grid_name} ({self.module_id}/{self.transaction_id}) for user {self.user_id}"

    class Meta:
        db_table = 'grid_layouts'
        unique_together = ['user_id', 'company_id', 'module_id', 'transaction_id', 'grid_name']
        indexes = [
            models.Index(fields=['company_id', 'user_id'], name='grid_layout_company_4e2a10_idx'),
        ]
