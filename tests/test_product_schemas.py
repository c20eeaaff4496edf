from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ProductValidationError
from app.models.product import Product
from app.schemas.product_schemas import (
    CREATE_FIELDS_MESSAGE,
    UPDATE_FIELDS_MESSAGE,
    group_by_category,
    has_value,
    parse_create_body,
    parse_update_body,
)

LIST_ID = "3b0f6c0e-8a7d-4c4f-9a55-0d6a1c2f9b10"

VALID_BODY = {
    "purchase_list_id": LIST_ID,
    "name": "Milk",
    "quantity": 2,
    "category": "Dairy",
    "price": 3.5,
    "place": "Fridge",
}


def product(name, category, **fields):
    data = {
        "id": f"id-{name}",
        "name": name,
        "quantity": 1,
        "category": category,
        "price": 1.0,
        "place": "Shelf",
        "purchase_list_id": LIST_ID,
        "created_by_id": "owner",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "checked": True,
        "checked_by_id": "owner",
    }
    data.update(fields)
    return Product(**data)


def test_group_by_category_keeps_first_seen_order():
    products = [
        product("milk", "Dairy"),
        product("bread", "Bakery"),
        product("cheese", "Dairy"),
        product("apple", "Fruit"),
        product("croissant", "Bakery"),
    ]

    groups = group_by_category(products)

    assert [g.category for g in groups] == ["Dairy", "Bakery", "Fruit"]
    assert [p.name for p in groups[0].products] == ["milk", "cheese"]
    assert [p.name for p in groups[1].products] == ["bread", "croissant"]
    assert [p.name for p in groups[2].products] == ["apple"]


def test_group_by_category_drops_bookkeeping_fields():
    groups = group_by_category([product("milk", "Dairy")])

    item = groups[0].products[0].model_dump()
    assert set(item) == {"id", "name", "quantity", "category", "price", "place"}


def test_group_by_category_empty():
    assert group_by_category([]) == []


@pytest.mark.parametrize("value,expected", [
    (None, False),
    ("", False),
    (0, True),
    (False, True),
    ("x", True),
])
def test_has_value(value, expected):
    assert has_value(value) is expected


def test_parse_create_body_accepts_exact_fields():
    product_create = parse_create_body(VALID_BODY)

    assert product_create.purchase_list_id == LIST_ID
    assert product_create.quantity == 2
    assert product_create.price == 3.5


@pytest.mark.parametrize("body", [
    {**VALID_BODY, "checked": True},
    {**VALID_BODY, "name": ""},
    {**VALID_BODY, "place": None},
    {k: v for k, v in VALID_BODY.items() if k != "category"},
    {},
    {**VALID_BODY, "quantity": "lots"},
])
def test_parse_create_body_rejects_with_combined_message(body):
    with pytest.raises(ProductValidationError) as exc_info:
        parse_create_body(body)

    assert str(exc_info.value) == CREATE_FIELDS_MESSAGE


def test_parse_update_body_keeps_only_allowed_fields():
    product_update = parse_update_body({"name": "Oat milk", "created_by_id": "intruder", "price": ""})

    assert product_update.model_dump(exclude_unset=True) == {"name": "Oat milk"}


def test_parse_update_body_accepts_checked_false():
    product_update = parse_update_body({"checked": False})

    assert product_update.model_dump(exclude_unset=True) == {"checked": False}


def test_parse_update_body_requires_a_valid_field():
    with pytest.raises(ProductValidationError) as exc_info:
        parse_update_body({"color": "blue", "name": None})

    assert str(exc_info.value) == UPDATE_FIELDS_MESSAGE


def test_product_created_at_defaults_to_aware_utc():
    fresh = Product(
        name="Milk", quantity=2, category="Dairy", price=3.5, place="Fridge",
        purchase_list_id=LIST_ID, created_by_id="owner",
    )

    assert fresh.created_at.tzinfo is not None
    assert fresh.created_at.utcoffset() == timedelta(0)
