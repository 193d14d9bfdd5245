from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from providers.errors import PipelineError
from providers.models import SyncLog
from providers.services.factory import get_stock_synchronizer


class Command(BaseCommand):
    help = "Reconcile stored stock of BigBuy products against the BigBuy API."

    def add_arguments(self, parser):
        parser.add_argument(
            "--product-id",
            action="append",
            dest="product_ids",
            default=None,
            help="Product id (bigbuy-123 or 123); repeat for several. Default: all BigBuy products",
        )
        parser.add_argument(
            "--active-only", action="store_true", help="Skip products whose status is not active"
        )
        parser.add_argument("--limit", type=int, default=None, help="Stop after N products")

    def handle(self, *args, **opts):
        try:
            result = get_stock_synchronizer().sync(
                product_ids=opts["product_ids"],
                active_only=opts["active_only"],
                limit=opts["limit"],
                log_type=SyncLog.TYPE_BATCH_UPDATE,
                performed_by="system",
            )
        except PipelineError as e:
            raise CommandError(str(e)) from e

        result.pop("results", None)
        self.stdout.write(self.style.SUCCESS(f"Stock sync complete: {result}"))
