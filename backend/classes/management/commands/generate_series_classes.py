from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from classes.models import ClassSeries
from classes.services import build_series_classes, bulk_insert_instances, missing_series_classes


class Command(BaseCommand):
    help = 'Generate the classes a series should have but does not (for example after a failed import)'

    def add_arguments(self, parser):
        parser.add_argument(
            'series_ids',
            nargs='*',
            type=int,
            help='IDs of the series to fill in',
        )
        parser.add_argument(
            '--all',
            action='store_true',
            help='Process every active series',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be generated without saving anything',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        if options['all']:
            series_list = ClassSeries.objects.filter(is_active=True).select_related('room')
        elif options['series_ids']:
            series_list = ClassSeries.objects.filter(pk__in=options['series_ids']).select_related('room')
            found = set(series_list.values_list('pk', flat=True))
            missing_ids = sorted(set(options['series_ids']) - found)
            if missing_ids:
                raise CommandError(f"Series not found: {', '.join(str(pk) for pk in missing_ids)}")
        else:
            raise CommandError('Pass one or more series IDs, or --all')

        generated_count = 0
        skipped_count = 0

        self.stdout.write('=' * 60)

        for series in series_list:
            result = missing_series_classes(series)

            if result['errors']:
                self.stdout.write(
                    self.style.WARNING(
                        f"Skipped: {series.series_name} ({'; '.join(result['errors'])})"
                    )
                )
                skipped_count += 1
                continue

            occurrences = result['occurrences']
            if not occurrences:
                self.stdout.write(f'Up to date: {series.series_name}')
                continue

            if dry_run:
                self.stdout.write(
                    f'[DRY RUN] Would generate {len(occurrences)} class(es) for {series.series_name}'
                )
                for start, _ in occurrences:
                    self.stdout.write(f'    {start.strftime("%Y-%m-%d %H:%M")}')
                generated_count += len(occurrences)
                continue

            with transaction.atomic():
                created = bulk_insert_instances(build_series_classes(series, occurrences))

            self.stdout.write(
                self.style.SUCCESS(f'Generated {created} class(es) for {series.series_name}')
            )
            generated_count += created

        self.stdout.write('=' * 60)

        if dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f'DRY RUN - Would generate {generated_count} class(es), '
                    f'skip {skipped_count} series'
                )
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Generated {generated_count} class(es), skipped {skipped_count} series'
                )
            )
