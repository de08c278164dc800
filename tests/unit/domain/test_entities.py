"""Tests for catalog entities."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from catalog_service.domain.entities import Brand, Category, Product, ProductImage, make_slug


class TestBrand:
    def test_create_generates_id(self):
        first = Brand.create(name="Acme", description="Tools")
        second = Brand.create(name="Acme", description="Tools")

        assert first.id != second.id
        assert first.display_order == 0
        assert first.image_file_name is None

    def test_fields_cannot_be_assigned(self, brand):
        with pytest.raises(ValidationError):
            brand.name = "Other"

    def test_update_applies_all_fields(self, brand):
        brand.update(
            name="Acme Corp",
            description="Tools and more",
            image_file_name="acme.png",
            display_order=5,
        )

        assert brand.name == "Acme Corp"
        assert brand.description == "Tools and more"
        assert brand.image_file_name == "acme.png"
        assert brand.display_order == 5

    def test_invalid_update_leaves_entity_untouched(self, brand):
        with pytest.raises(ValidationError):
            brand.update(name="", description="x", image_file_name=None, display_order=3)

        assert brand.name == "Acme"
        assert brand.display_order == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"name": "", "description": "d"},
            {"name": "n" * 51, "description": "d"},
            {"name": "n", "description": ""},
            {"name": "n", "description": "d" * 1001},
            {"name": "n", "description": "d", "display_order": -1},
        ],
    )
    def test_validation_rules(self, kwargs):
        with pytest.raises(ValidationError):
            Brand.create(**kwargs)

    def test_whitespace_is_stripped(self):
        brand = Brand.create(name="  Acme  ", description=" Tools ")
        assert brand.name == "Acme"
        assert brand.description == "Tools"


class TestCategory:
    def test_create_with_parent(self, category):
        child = Category.create(
            name="Nails", description="Small and pointy", parent_category_id=category.id
        )
        assert child.parent_category_id == category.id

    def test_cannot_be_own_parent(self, category):
        with pytest.raises(ValidationError):
            category.update(
                parent_category_id=category.id,
                name=category.name,
                description=category.description,
                image_file_name=None,
                display_order=0,
            )
        assert category.parent_category_id is None


class TestProduct:
    def test_slug_derived_from_name_and_sku(self, product):
        assert product.slug == "anvil-3000-anv3000xyz"

    def test_slug_cannot_be_supplied(self):
        product = Product(
            name="Widget",
            description="A widget",
            price=Decimal("1"),
            sku="WIDGET0001",
            slug="hand-written",
        )
        assert product.slug == "widget-widget0001"

    def test_update_recomputes_slug(self, product):
        product.update(
            brand_id=None,
            category_id=None,
            name="Anvil 4000",
            description=product.description,
            price=product.price,
            discount=product.discount,
            sku="ANV4000XYZ",
            stock=product.stock,
            availability=False,
        )

        assert product.slug == "anvil-4000-anv4000xyz"
        assert product.availability is False

    def test_discounted_price(self, product):
        assert product.discounted_price == Decimal("199.99") * Decimal("0.85")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"sku": "SHORT"},
            {"sku": "WAYTOOLONGSKU"},
            {"price": Decimal("-1")},
            {"discount": Decimal("1.01")},
            {"discount": Decimal("-0.1")},
            {"stock": -1},
        ],
    )
    def test_validation_rules(self, overrides):
        fields = {
            "name": "Widget",
            "description": "A widget",
            "price": Decimal("10"),
            "sku": "WIDGET0001",
            **overrides,
        }
        with pytest.raises(ValidationError):
            Product.create(**fields)


class TestProductImage:
    def test_update_display_order(self):
        image = ProductImage.create(product_id=uuid4(), image_file_name="a.png", display_order=0)
        image.update(display_order=3)
        assert image.display_order == 3

    def test_negative_display_order_rejected(self):
        with pytest.raises(ValidationError):
            ProductImage.create(product_id=uuid4(), image_file_name="a.png", display_order=-1)


@pytest.mark.parametrize(
    ("name", "sku", "expected"),
    [
        ("Anvil", "ANV0000001", "anvil-anv0000001"),
        ("Big   Red -- Anvil!", "AB-CD-EF-1", "big-red-anvil-ab-cd-ef-1"),
        ("--Edge--", "SKU0000001", "edge-sku0000001"),
    ],
)
def test_make_slug(name, sku, expected):
    assert make_slug(name, sku) == expected
