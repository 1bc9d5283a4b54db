import uuid

import apps.households.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Household',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('country', models.CharField(default=apps.households.models.default_country, help_text='ISO-2 country code', max_length=2)),
                ('timezone', models.CharField(default=apps.households.models.default_timezone, help_text='IANA timezone name', max_length=64)),
                ('locale', models.CharField(default=apps.households.models.default_locale, max_length=5)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Child',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('household_id', models.UUIDField(db_index=True)),
                ('first_name', models.CharField(max_length=100)),
                ('birthdate', models.DateField()),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'children',
                'ordering': ['birthdate', 'first_name'],
            },
        ),
        migrations.CreateModel(
            name='HouseholdTemplateSettings',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('household_id', models.UUIDField(db_index=True)),
                ('template_id', models.CharField(help_text='Catalog template id or milestone:<id>', max_length=100)),
                ('is_enabled', models.BooleanField(default=True)),
                ('custom_days_before', models.PositiveIntegerField(blank=True, null=True)),
                ('custom_weight', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'household template settings',
                'unique_together': {('household_id', 'template_id')},
            },
        ),
    ]
