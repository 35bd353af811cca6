"""
Django management command to rotate a brand's API key.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from brands.application.commands.brand_commands import RotateApiKeyCommand
from brands.application.handlers.brand_handlers import RotateApiKeyHandler
from brands.infrastructure.repositories.django_brand_repository import DjangoBrandRepository
from core.domain.exceptions import DomainException


class Command(BaseCommand):
    """Command to revoke a brand's API keys and issue a new one."""

    help = "Revoke every API key of a brand and print a new one"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("slug", type=str, help="Brand slug")

    def handle(self, *args, **options):
        """Execute the command."""
        repository = DjangoBrandRepository()
        brand = async_to_sync(repository.find_by_slug)(options["slug"])
        if brand is None:
            raise CommandError(f"Brand '{options['slug']}' not found")

        try:
            result = async_to_sync(RotateApiKeyHandler(repository).handle)(
                RotateApiKeyCommand(brand_id=brand.id)
            )
        except DomainException as e:
            raise CommandError(e.message) from e

        self.stdout.write(
            self.style.SUCCESS(f"Revoked {result.revoked_keys} key(s) of {result.brand.slug}")
        )
        self.stdout.write(f"API key: {result.api_key}")
