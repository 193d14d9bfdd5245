from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from providers.errors import PipelineError
from providers.services.factory import get_importer


class Command(BaseCommand):
    help = "Pull one page of the BigBuy catalog into products / admin_products."

    def add_arguments(self, parser):
        parser.add_argument("--category", default=None, help="BigBuy category id")
        parser.add_argument("--limit", type=int, default=100, help="Max 100 (upstream ceiling)")

    def handle(self, *args, **opts):
        try:
            result = get_importer().sync_products(
                category=opts["category"], limit=opts["limit"], performed_by="system"
            )
        except PipelineError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f"Catalog sync complete: {result}"))
