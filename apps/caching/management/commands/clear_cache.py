"""
Management command to drop cached derived views.

Usage:
    python manage.py clear_cache --prefix ranking
    python manage.py clear_cache --all
"""

from django.core.management.base import BaseCommand, CommandError

from apps.caching.keys import CLEARABLE_PREFIXES
from apps.caching.store import clear_prefix


class Command(BaseCommand):
    help = 'Invalidate every cache entry under a prefix'

    def add_arguments(self, parser):
        parser.add_argument(
            '--prefix',
            choices=CLEARABLE_PREFIXES,
            help='Cache namespace to clear',
        )
        parser.add_argument(
            '--all',
            action='store_true',
            help='Clear every namespace except vouchers',
        )

    def handle(self, *args, **options):
        if options['all']:
            prefixes = list(CLEARABLE_PREFIXES)
        elif options['prefix']:
            prefixes = [options['prefix']]
        else:
            raise CommandError('Pass --prefix <name> or --all')

        for prefix in prefixes:
            generation = clear_prefix(prefix)
            self.stdout.write(
                self.style.SUCCESS(f'Cleared {prefix} (generation {generation})')
            )
