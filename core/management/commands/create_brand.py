"""
Django management command to register a brand.

Prints the brand's API key once; only its hash is stored.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from brands.application.commands.brand_commands import CreateBrandCommand
from brands.application.handlers.brand_handlers import CreateBrandHandler
from brands.infrastructure.repositories.django_brand_repository import DjangoBrandRepository
from core.domain.exceptions import DomainException


class Command(BaseCommand):
    """Command to create a brand and its first API key."""

    help = "Create a brand and print its API key"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("name", type=str, help="Brand display name")
        parser.add_argument("slug", type=str, help="Unique brand slug")

    def handle(self, *args, **options):
        """Execute the command."""
        handler = CreateBrandHandler(DjangoBrandRepository())
        try:
            result = async_to_sync(handler.handle)(
                CreateBrandCommand(name=options["name"], slug=options["slug"])
            )
        except DomainException as e:
            raise CommandError(e.message) from e

        self.stdout.write(self.style.SUCCESS(f"Created brand {result.brand.slug} ({result.brand.id})"))
        self.stdout.write(f"API key: {result.api_key}")
        self.stdout.write(self.style.WARNING("Store this key now; it cannot be shown again."))
