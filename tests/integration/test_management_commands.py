"""
Integration tests for management commands.
"""

import re

import pytest
from asgiref.sync import async_to_sync
from django.core.management import CommandError, call_command

from licenses.infrastructure.models import AuditLog


def printed_key(output: str) -> str:
    return re.search(r"API key: (\S+)", output).group(1)


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateBrandCommand:
    def test_create_brand(self, capsys, brand_repository):
        call_command("create_brand", "Content AI", "content-ai")

        key = printed_key(capsys.readouterr().out)
        brand = async_to_sync(brand_repository.find_by_api_key)(key)
        assert str(brand.slug) == "content-ai"
        assert AuditLog.objects.filter(action="brand_created").exists()

    def test_duplicate_slug(self, db_brand):
        with pytest.raises(CommandError):
            call_command("create_brand", "Again", str(db_brand.slug))


@pytest.mark.django_db
@pytest.mark.integration
class TestRotateApiKeyCommand:
    def test_rotate(self, capsys, brand_credentials, brand_repository):
        call_command("rotate_api_key", str(brand_credentials.brand.slug))

        output = capsys.readouterr().out
        assert "Revoked 1 key(s)" in output
        find = async_to_sync(brand_repository.find_by_api_key)
        assert find(brand_credentials.api_key) is None
        assert find(printed_key(output)).id == brand_credentials.brand.id

    def test_unknown_brand(self, db):
        with pytest.raises(CommandError, match="not found"):
            call_command("rotate_api_key", "nobody")
