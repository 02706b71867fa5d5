"""Management command to mark departed schedules as arrived"""
from django.core.management.base import BaseCommand
from intercity_main_app.services import ScheduleService


class Command(BaseCommand):
    help = 'Move departed schedules whose estimated arrival has passed to arrived'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Only report how many schedules are due')

    def handle(self, *args, **options):
        if options['dry_run']:
            due = ScheduleService().due_arrivals().count()
            self.stdout.write(f'{due} schedules due to be marked arrived')
            return

        marked = ScheduleService().mark_arrived_schedules()
        if marked == 0:
            self.stdout.write('No schedules to mark arrived')
            return

        self.stdout.write(self.style.SUCCESS(f'Completed: {marked} schedules marked arrived'))
