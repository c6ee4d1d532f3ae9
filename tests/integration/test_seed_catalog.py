from io import StringIO

import pytest
from django.core.management import call_command

from modules.products.models import Product

pytestmark = pytest.mark.integration


def test_seed_catalog_creates_products():
    out = StringIO()
    call_command("seed_catalog", stdout=out)

    assert Product.objects.count() == 5
    assert set(
        Product.objects.filter(requires_prescription=True).values_list("sku", flat=True)
    ) == {"PROD-003", "PROD-004"}
    assert "created=5" in out.getvalue()


def test_seed_catalog_is_idempotent():
    call_command("seed_catalog", stdout=StringIO())
    out = StringIO()
    call_command("seed_catalog", stdout=out)

    assert Product.objects.count() == 5
    assert "created=0" in out.getvalue()
