from datetime import timedelta
from django.utils import timezone
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from apps.core.task_service import TaskService
from apps.generation.models import GeneratedTask
from apps.household_tasks import services as task_services
from apps.household_tasks.models import Task
from apps.households import services as household_services
from apps.households.models import Child, Household, HouseholdTemplateSettings

User = get_user_model()

DEMO_HOUSEHOLD = "Famille Martin"

# (first name, age in days)
DEMO_CHILDREN = [
    ("Léa", 2 * 365 + 40),
    ("Hugo", 7 * 365 + 120),
    ("Inès", 12 * 365 + 15),
]


class Command(BaseCommand):
    help = 'Seeds the database with a demo household for testing.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Delete existing data before seeding',
        )
        parser.add_argument(
            '--users',
            action='store_true',
            help='Seed users only',
        )
        parser.add_argument(
            '--households',
            action='store_true',
            help='Seed the demo household, children and overrides only',
        )
        parser.add_argument(
            '--generate',
            action='store_true',
            help='Run task generation for the demo household only',
        )

    def handle(self, *args, **options):
        seed_all = not any([options['users'], options['households'], options['generate']])

        if options['clean']:
            self.stdout.write(self.style.WARNING('Cleaning database...'))
            self._clean_database()
            self.stdout.write(self.style.SUCCESS('Database cleaned.'))

        if seed_all or options['users']:
            self._seed_users()

        household = None
        if seed_all or options['households']:
            household = self._seed_household()

        if seed_all or options['generate']:
            household = household or Household.objects.filter(name=DEMO_HOUSEHOLD).first()
            if household is None:
                self.stderr.write(self.style.ERROR('Demo household not found, run with --households first'))
                return
            self._seed_generation(household.id)

        self.stdout.write(self.style.SUCCESS('Seeding completed successfully.'))

    def _clean_database(self):
        GeneratedTask.objects.all().delete()
        Task.objects.all().delete()
        HouseholdTemplateSettings.objects.all().delete()
        Child.objects.all().delete()
        Household.objects.all().delete()
        User.objects.exclude(is_superuser=True).delete()

    def _seed_users(self):
        self.stdout.write('Seeding Users...')

        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser(
                username="admin",
                email="admin@example.com",
                password="password123",
            )
            self.stdout.write(' - Created admin (password123)')

        if not User.objects.filter(username="parent").exists():
            User.objects.create_user(
                username="parent",
                email="parent@example.com",
                password="password123",
                first_name="Claire",
                last_name="Martin",
            )
            self.stdout.write(' - Created parent (password123)')

    def _seed_household(self):
        self.stdout.write('Seeding Household...')

        household = Household.objects.filter(name=DEMO_HOUSEHOLD).first()
        if household:
            self.stdout.write(f'Using existing Household: {household.name}')
            return household

        dto = household_services.create_household(DEMO_HOUSEHOLD, country="FR", timezone="Europe/Paris")
        self.stdout.write(f'Created Household: {dto.name}')

        today = timezone.localdate()
        for first_name, age_days in DEMO_CHILDREN:
            household_services.add_child(dto.id, first_name, today - timedelta(days=age_days))
            self.stdout.write(f' - Added child {first_name}')

        # A family that handles bath time without reminders, and wants more notice for the dentist
        household_services.update_template_settings(dto.id, 'bath_time', is_enabled=False)
        household_services.update_template_settings(dto.id, 'dentist_checkup', custom_days_before=30)

        task_services.create_recurring_task(
            dto.id,
            "Sortir les poubelles",
            {"frequency": "weekly", "byDayOfWeek": [2, 5]},
            today + timedelta(days=1),
            category="logistics",
        )
        self.stdout.write(' - Added a recurring household task')
        return Household.objects.get(id=dto.id)

    def _seed_generation(self, household_id):
        self.stdout.write('Generating catalog tasks...')
        job_id = TaskService.generate_for_household(household_id)
        created = GeneratedTask.objects.filter(household_id=household_id).count()
        self.stdout.write(f' - Job {job_id} sent, {created} ledger entries for the household')
