# Generated manually for the audit log table

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(blank=True, max_length=50, null=True)),
                ('company_id', models.CharField(blank=True, max_length=50, null=True)),
                ('action', models.CharField(choices=[('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('view', 'View'), ('bulk_action', 'Bulk Action'), ('leave_request_save', 'Leave Request Saved'), ('checklist_save', 'Checklist Saved'), ('layout_update', 'Grid Layout Updated'), ('layout_reset', 'Grid Layout Reset')], max_length=50)),
                ('model_name', models.CharField(max_length=100)),
                ('object_id', models.CharField(max_length=100)),
                ('object_reference', models.CharField(blank=True, help_text='Reference identifier (e.g., backend path, document number)', max_length=255, null=True)),
                ('changes', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['-created_at'], name='audit_logs_created_6f1b2e_idx'),
                    models.Index(fields=['action'], name='audit_logs_action_3c9d41_idx'),
                    models.Index(fields=['model_name'], name='audit_logs_model_n_8a2f07_idx'),
                    models.Index(fields=['company_id'], name='audit_logs_company_51e0c3_idx'),
                    models.Index(fields=['object_reference'], name='audit_logs_object__b7d4a9_idx'),
                ],
            },
        ),
    ]
