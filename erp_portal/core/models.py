from django.db import models


class AuditLog(models.Model):
    """Audit log for operations forwarded to the ERP backend"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('view', 'View'),
        ('bulk_action', 'Bulk Action'),
        ('leave_request_save', 'Leave Request Saved'),
        ('checklist_save', 'Checklist Saved'),
        ('layout_update', 'Grid Layout Updated'),
        ('layout_reset', 'Grid Layout Reset'),
    ]

    # Identity comes from the backend token, there is no local user table
    user_id = models.CharField(max_length=50, blank=True, null=True)
    company_id = models.CharField(max_length=50, blank=True, null=True)
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., backend path, document number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} {self.model_name} {self.object_id}"

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_6f1b2e_idx'),
            models.Index(fields=['action'], name='audit_logs_action_3c9d41_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_8a2f07_idx'),
            models.Index(fields=['company_id'], name='audit_logs_company_51e0c3_idx'),
            models.Index(fields=['object_reference'], name='audit_logs_object__b7d4a9_idx'),
        ]
