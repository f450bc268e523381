"""
Management command to rebuild customer stats from the order history.

Customer totals and loyalty balances are a cache over orders. When the
post-commit ledger step of an order fails it is logged and left for this
command, which replays the missed orders and rewrites the cached values.
"""
from django.core.management.base import BaseCommand, CommandError
from customers.models import Customer
from customers.services import CustomerLedgerService
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Re-derive customer order totals and loyalty balances from their orders'

    def add_arguments(self, parser):
        parser.add_argument(
            '--customer',
            dest='customer_id',
            help='Only reconcile the customer with this id',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=200,
            help='Customers loaded per batch (default: 200)',
        )

    def handle(self, *args, **options):
        customer_id = options['customer_id']
        batch_size = options['batch_size']

        if customer_id:
            customers = Customer.objects.filter(pk=customer_id)
            if not customers.exists():
                raise CommandError(f"Customer {customer_id} not found")
        else:
            customers = Customer.objects.all().order_by('created_at')

        total = customers.count()
        self.stdout.write(f"Reconciling {total} customer(s)")

        corrected = 0
        replayed = 0
        for customer in customers.iterator(chunk_size=batch_size):
            result = CustomerLedgerService.reconcile_customer(customer)
            corrected += int(result.changed or result.replayed_orders > 0)
            replayed += result.replayed_orders

        self.stdout.write(f"Replayed {replayed} unrecorded order(s)")
        self.stdout.write(self.style.SUCCESS(
            f"Done. {corrected} of {total} customer(s) corrected."
        ))
