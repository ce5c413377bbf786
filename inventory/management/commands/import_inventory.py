# inventory/management/commands/import_inventory.py
"""
Django management command to import blood units from a CSV or Excel file
Usage: python manage.py import_inventory path/to/units.xlsx --hospital 3

Expected columns: blood_type, quantity_units, collection_date
Optional columns: storage_location, batch_number, notes
"""
from pathlib import Path

import pandas as pd
from django.core.management.base import BaseCommand, CommandError

from hospitals.models import Hospital
from inventory.models import BloodUnit
from inventory.utils import add_unit

REQUIRED_COLUMNS = ['blood_type', 'quantity_units', 'collection_date']


def read_table(path):
    if Path(path).suffix.lower() == '.csv':
        return pd.read_csv(path)
    return pd.read_excel(path)


def optional_text(row, column):
    value = row.get(column)
    return '' if pd.isna(value) else str(value).strip()


class Command(BaseCommand):
    help = 'Import blood units into a hospital inventory from a CSV or Excel file'

    def add_arguments(self, parser):
        parser.add_argument('file', type=str, help='Path to the CSV/Excel file')
        parser.add_argument('--hospital', type=int, required=True, help='Hospital id to import into')

    def handle(self, *args, **options):
        path = options['file']
        try:
            hospital = Hospital.objects.get(id=options['hospital'])
        except Hospital.DoesNotExist:
            raise CommandError(f"Hospital {options['hospital']} does not exist")

        try:
            df = read_table(path)
        except FileNotFoundError:
            raise CommandError(f'File not found: {path}')

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise CommandError(f'Missing column(s): {", ".join(missing)}')

        self.stdout.write(self.style.WARNING(f'Importing {len(df)} row(s) into {hospital.name}...'))
        df = df.dropna(subset=REQUIRED_COLUMNS)

        imported_count = 0
        skipped_count = 0

        for index, row in df.iterrows():
            line = index + 2
            batch_number = optional_text(row, 'batch_number')
            if batch_number and BloodUnit.objects.filter(batch_number=batch_number).exists():
                self.stdout.write(self.style.WARNING(f'Skipping row {line}: batch {batch_number} already exists'))
                skipped_count += 1
                continue

            try:
                unit = add_unit(
                    hospital,
                    str(row['blood_type']).strip().upper(),
                    int(row['quantity_units']),
                    pd.to_datetime(row['collection_date']).date(),
                    storage_location=optional_text(row, 'storage_location'),
                    notes=optional_text(row, 'notes'),
                    batch_number=batch_number or None,
                )
            except (ValueError, TypeError) as e:
                self.stdout.write(self.style.WARNING(f'Skipping row {line}: {e}'))
                skipped_count += 1
                continue

            imported_count += 1
            self.stdout.write(f'Created: {unit.batch_number} {unit.blood_type} x{unit.quantity_units}')

        self.stdout.write(
            self.style.SUCCESS(
                f'\nImport complete!\n'
                f'Created: {imported_count}\n'
                f'Skipped: {skipped_count}'
            )
        )
