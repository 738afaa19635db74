"""
Management command to audit balances against their movements.

Usage:
    python manage.py check_balances
    python manage.py check_balances --fix
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db.models import Sum
from django.db.models.functions import Coalesce

from warehouseman.models import Balance


class Command(BaseCommand):
    """Compare every balance with the sum of its movements."""

    help = 'Checks balances against their movements'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Rewrite drifted balances from their movements'
        )

    def handle(self, *args, **options):
        balances = Balance.objects.select_related('resource', 'unit').annotate(
            journal=Coalesce(Sum('movements__delta'), Decimal('0'))
        )

        drifted = 0
        for balance in balances:
            if balance.journal == balance.quantity:
                continue
            drifted += 1
            self.stdout.write(
                f'{balance.resource} [{balance.unit}]: '
                f'{balance.quantity} recorded, {balance.journal} journaled'
            )
            if options['fix']:
                balance.recalculate()

        if not drifted:
            self.stdout.write(self.style.SUCCESS('All balances match their movements'))
        elif options['fix']:
            self.stdout.write(self.style.SUCCESS(f'{drifted} balance(s) fixed'))
        else:
            self.stdout.write(self.style.WARNING(f'{drifted} balance(s) drifted'))
