import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('household_id', models.UUIDField(db_index=True)),
                ('child_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, max_length=30)),
                ('deadline', models.DateField(blank=True, null=True)),
                ('priority', models.CharField(choices=[('critical', 'Critical'), ('high', 'High'), ('medium', 'Medium'), ('low', 'Low')], default='medium', max_length=10)),
                ('load_weight', models.PositiveSmallIntegerField(default=1)),
                ('is_critical', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('done', 'Done'), ('cancelled', 'Cancelled')], default='pending', max_length=10)),
                ('source', models.CharField(choices=[('manual', 'Manual'), ('catalog', 'Catalog'), ('recurrence', 'Recurrence')], default='manual', max_length=10)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('template_id', models.CharField(blank=True, max_length=100, null=True)),
                ('generation_key', models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ('recurrence_rule', models.JSONField(blank=True, null=True)),
                ('series_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('parent_task_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('created_by_id', models.IntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['deadline', 'created_at'],
                'indexes': [models.Index(fields=['household_id', 'status'], name='household_t_househo_7c1f0e_idx')],
            },
        ),
    ]
