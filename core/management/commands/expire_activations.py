"""
Django management command to expire seats of lapsed licenses.

Marks ACTIVE activations of time-expired licenses as EXPIRED, freeing
their seats. An expired instance gets its seat back by activating again
once the license is renewed. Run it periodically (e.g. via cron).
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from activations.domain.events import ActivationsExpired
from activations.infrastructure.repositories.django_seat_ledger import DjangoSeatLedger
from core.domain.clock import utc_now
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to expire activations of lapsed licenses."""

    help = "Mark active activations of expired licenses as expired"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report what would be expired",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        results = async_to_sync(self._run)(dry_run)
        total = sum(result["count"] for result in results)

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for result in results:
                self.stdout.write(f"  - License {result['license_id']}: {result['count']} seat(s)")
            self.stdout.write(f"Would expire {total} activation(s) on {len(results)} license(s)")
            return

        logger.info("Expired activations", extra={"licenses": len(results), "activations": total})
        self.stdout.write(
            self.style.SUCCESS(f"Expired {total} activation(s) on {len(results)} license(s)")
        )

    async def _run(self, dry_run: bool):
        results = await DjangoSeatLedger().expire_lapsed(utc_now(), dry_run=dry_run)
        if not dry_run:
            for result in results:
                await event_bus.publish(
                    ActivationsExpired(
                        license_id=result["license_id"],
                        license_key_id=result["license_key_id"],
                        brand_id=result["brand_id"],
                        expired_count=result["count"],
                    )
                )
        return results
