# Generated manually for the grid layout table

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='GridLayout',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(max_length=50)),
                ('company_id', models.CharField(max_length=50)),
                ('module_id', models.PositiveIntegerField()),
                ('transaction_id', models.PositiveIntegerField()),
                ('grid_name', models.CharField(max_length=100)),
                ('sort', models.JSONField(blank=True, default=list, help_text='List of {id, desc} sort entries')),
                ('column_visibility', models.JSONField(blank=True, default=dict)),
                ('column_sizing', models.JSONField(blank=True, default=dict)),
                ('column_order', models.JSONField(blank=True, default=list)),
                ('page_size', models.PositiveIntegerField(choices=[(10, '10'), (50, '50'), (100, '100'), (500, '500')], default=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'grid_layouts',
                'unique_together': {('user_id', 'company_id', 'module_id', 'transaction_id', 'grid_name')},
                'indexes': [models.Index(fields=['company_id', 'user_id'], name='grid_layout_company_4e2a10_idx')],
            },
        ),
    ]
