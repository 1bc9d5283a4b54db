import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='GeneratedTask',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('household_id', models.UUIDField(db_index=True)),
                ('child_id', models.UUIDField(db_index=True)),
                ('template_id', models.CharField(max_length=100)),
                ('task_id', models.UUIDField(blank=True, help_text='Set once the task row exists', null=True)),
                ('deadline', models.DateField()),
                ('generation_key', models.CharField(max_length=255, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('created', 'Created'), ('skipped', 'Skipped'), ('expired', 'Expired')], default='pending', max_length=10)),
                ('acknowledged', models.BooleanField(default=False)),
                ('acknowledged_at', models.DateTimeField(blank=True, null=True)),
                ('acknowledged_by_id', models.IntegerField(blank=True, null=True)),
                ('generated_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['deadline', 'template_id'],
                'indexes': [
                    models.Index(fields=['household_id', 'status'], name='generation__househo_3a9d2b_idx'),
                    models.Index(fields=['status', 'deadline'], name='generation__status_5e8c41_idx'),
                ],
            },
        ),
    ]
