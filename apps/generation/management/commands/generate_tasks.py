"""
Management command to run catalog task generation.
"""
from datetime import date
from uuid import UUID

from django.core.management.base import BaseCommand, CommandError

from apps.core.task_service import TaskService
from apps.generation import services
from apps.household_tasks import services as task_services


class Command(BaseCommand):
    help = 'Generates due catalog tasks for one household or for all active households'

    def add_arguments(self, parser):
        parser.add_argument(
            '--household-id',
            type=str,
            help='Household UUID to generate for. If not provided, sweeps all active households.',
        )
        parser.add_argument(
            '--date',
            type=str,
            help='Generation date (YYYY-MM-DD). Defaults to each household\'s local today.',
        )
        parser.add_argument(
            '--pending',
            action='store_true',
            help='Record candidates as pending instead of creating tasks',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Print the plan without writing anything',
        )
        parser.add_argument(
            '--expire',
            action='store_true',
            help='Also expire pending generations past their deadline',
        )
        parser.add_argument(
            '--recurring',
            action='store_true',
            help='Also create missing follow-ups for completed recurring tasks',
        )
        parser.add_argument(
            '--queue',
            action='store_true',
            help='Send the jobs to the configured task backend instead of running them inline',
        )

    def handle(self, *args, **options):
        as_of = self._parse_date(options.get('date'))
        household_id = options.get('household_id')

        if options['dry_run']:
            if not household_id:
                raise CommandError('--dry-run requires --household-id')
            self._print_plan(self._parse_uuid(household_id), as_of)
            return

        if options['queue']:
            self._queue(household_id, options)
            return

        if household_id:
            try:
                result = services.generate_for_household(
                    self._parse_uuid(household_id),
                    as_of=as_of,
                    auto_materialize=not options['pending'],
                )
            except ValueError as e:
                raise CommandError(str(e))
            for detail in result.details:
                if not detail.success:
                    self.stderr.write(self.style.ERROR(
                        f'  {detail.template_id} / {detail.child_id}: {detail.error}'
                    ))
            self.stdout.write(self.style.SUCCESS(
                f'Generated {result.generated}, skipped {result.skipped}, errors {result.errors}'
            ))
        else:
            result = services.sweep_households(as_of=as_of)
            self.stdout.write(self.style.SUCCESS(
                f'Swept {result.households} households: generated {result.generated}, '
                f'skipped {result.skipped}, errors {result.errors}, '
                f'failed households {result.failed_households}'
            ))

        if options['expire']:
            count = services.expire_pending(as_of)
            self.stdout.write(f'Expired {count} pending generations')

        if options['recurring']:
            result = task_services.process_completed_recurring_tasks()
            self.stdout.write(
                f'Recurring tasks: processed {result.processed}, generated {result.generated}, '
                f'errors {result.errors}'
            )

    def _queue(self, household_id, options):
        if options['date'] or options['pending']:
            raise CommandError('--queue runs with the default date and generation mode')
        if household_id:
            job_ids = [TaskService.generate_for_household(self._parse_uuid(household_id))]
        else:
            job_ids = [TaskService.sweep_households()]
        if options['expire']:
            job_ids.append(TaskService.expire_pending_generations())
        if options['recurring']:
            job_ids.append(TaskService.process_completed_recurring_tasks())
        for job_id in job_ids:
            self.stdout.write(f'Queued job {job_id}')

    def _print_plan(self, household_id: UUID, as_of):
        try:
            report = services.plan_household(household_id, as_of=as_of)
        except ValueError as e:
            raise CommandError(str(e))
        for candidate in report.candidates:
            self.stdout.write(
                f'{candidate.deadline}  {candidate.timing:<6}  {candidate.child.first_name:<12}  '
                f'{candidate.template.title}'
            )
        for failure in report.failures:
            self.stderr.write(self.style.WARNING(f'{failure.template_id}: {failure.error}'))
        self.stdout.write(f'{len(report.candidates)} candidates, {len(report.failures)} failures')

    @staticmethod
    def _parse_date(value):
        if not value:
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise CommandError(f'Invalid date: {value}')

    @staticmethod
    def _parse_uuid(value):
        try:
            return UUID(value)
        except ValueError:
            raise CommandError(f'Invalid household id: {value}')
