from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('household_tasks', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='task',
            name='series_ended_at',
            field=models.DateTimeField(blank=True, help_text='Set once no follow-up will ever be created', null=True),
        ),
        migrations.AddConstraint(
            model_name='task',
            constraint=models.UniqueConstraint(
                condition=models.Q(parent_task_id__isnull=False),
                fields=('parent_task_id',),
                name='household_task_unique_follow_up',
            ),
        ),
    ]
