"""
Cache invalidation signals
Drop the cached copy of a grid layout whenever it is saved or deleted
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from erp_portal.core.cache_utils import invalidate_grid_layout

from .models import GridLayout

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=GridLayout)
def invalidate_grid_layout_cache(sender, instance, **kwargs):
    invalidate_grid_layout(
        instance.user_id, instance.company_id, instance.module_id, instance.transaction_id, instance.grid_name
    )
    logger.debug(f"Invalidated grid layout cache for {instance}")
