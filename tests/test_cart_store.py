"""Tests for the persisted cart store (merge, quantity, totals, persistence)."""
from __future__ import annotations

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import make_entry


def test_repeated_add_merges_into_one_line(make_store) -> None:
    cart = make_store()
    for _ in range(4):
        cart.add_item(make_entry("prod-1"))

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 4


def test_first_add_inserts_with_quantity_one(make_store) -> None:
    cart = make_store()
    item = cart.add_item(make_entry("gig-7", kind="gig", price="150.00"))

    assert item.quantity == 1
    assert item.kind == "gig"
    assert cart.get_cart_item_count() == 1


def test_re_add_keeps_first_snapshot(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1", price="10.00", name="Poster"))
    cart.add_item(make_entry("prod-1", price="25.00", name="Poster (new edition)"))

    (item,) = cart.items
    assert item.quantity == 2
    assert item.price == Decimal("10.00")
    assert item.name == "Poster"


def test_update_quantity_sets_absolute_value(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    cart.add_item(make_entry("prod-1"))

    cart.update_quantity("prod-1", 7)

    assert cart.items[0].quantity == 7


def test_update_quantity_zero_or_negative_removes(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    cart.add_item(make_entry("prod-2"))

    cart.update_quantity("prod-1", 0)
    cart.update_quantity("prod-2", -3)

    assert cart.is_empty()


def test_update_quantity_unknown_id_is_noop(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))

    cart.update_quantity("missing", 5)

    assert [(it.id, it.quantity) for it in cart.items] == [("prod-1", 1)]


def test_remove_unknown_id_is_noop(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))

    cart.remove_item("missing")
    cart.remove_item("prod-1")
    cart.remove_item("prod-1")

    assert cart.is_empty()


def test_empty_cart_aggregates_are_zero(make_store) -> None:
    cart = make_store()

    assert cart.get_cart_item_count() == 0
    assert cart.get_cart_total() == Decimal("0")


def test_total_is_exact_sum_of_line_totals(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1", price="9.99"))
    cart.add_item(make_entry("prod-1", price="9.99"))
    cart.add_item(make_entry("prod-1", price="9.99"))
    cart.add_item(make_entry("music-1", kind="music", price="0.10"))
    cart.add_item(make_entry("gig-1", kind="gig", price="0.20"))

    summary = cart.summary()

    assert cart.get_cart_total() == Decimal("30.27")
    assert summary.total_price == sum(row.line_total for row in summary.items)
    assert summary.total_quantity == 5


def test_clear_cart_empties_everything(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    cart.add_item(make_entry("gig-1", kind="gig"))

    cart.clear_cart()

    assert cart.is_empty()
    assert make_store().is_empty()


def test_every_mutation_is_visible_after_reload(make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1", price="12.50", imageUrl="https://cdn/img.png", artist="artist-9"))
    cart.add_item(make_entry("prod-1"))
    cart.add_item(make_entry("music-1", kind="music", price="1.29", subcategory="jazz"))
    cart.add_item(make_entry("gig-1", kind="gig", price="300"))
    cart.update_quantity("music-1", 3)
    cart.remove_item("gig-1")

    reloaded = make_store()

    assert {(it.id, it.quantity, it.price) for it in reloaded.items} == {
        ("prod-1", 2, Decimal("12.50")),
        ("music-1", 3, Decimal("1.29")),
    }
    assert [it.id for it in reloaded.items] == ["prod-1", "music-1"]
    prod = reloaded.items[0]
    assert prod.image_url == "https://cdn/img.png"
    assert prod.artist == "artist-9"
    assert reloaded.items[1].subcategory == "jazz"


@pytest.mark.parametrize("price", ["9999999999.99", "0.01", "1234567.89", "0"])
def test_price_at_precision_limit_survives_reload(make_store, price) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1", price=price))
    cart.add_item(make_entry("prod-1", price=price))

    (item,) = make_store().items

    assert item.price == Decimal(price)
    assert make_store().get_cart_total() == Decimal(price) * 2


@pytest.mark.parametrize(
    "price",
    ["0.12345678901234567890123", "0.125", "1e400", "99999999999.99"],
)
def test_price_beyond_stored_precision_is_rejected(make_store, price) -> None:
    with pytest.raises(ValidationError):
        make_entry("prod-1", price=price)

    assert make_store().is_empty()


def test_persisted_record_layout(make_store, storage_repo, session, profile_id) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1", price="9.99", imageUrl="https://cdn/a.png"))

    record = storage_repo.get_json(session, profile_id, "artist-connect-cart")

    assert record["version"] == 0
    (item,) = record["state"]["items"]
    assert item["type"] == "product"
    assert item["price"] == 9.99
    assert item["quantity"] == 1
    assert item["imageUrl"] == "https://cdn/a.png"


def test_load_ignores_unknown_and_missing_optional_fields(
    make_store, storage_repo, session, profile_id
) -> None:
    storage_repo.set_json(
        session,
        profile_id,
        "artist-connect-cart",
        {
            "state": {
                "items": [
                    {
                        "type": "music",
                        "id": "music-1",
                        "name": "Track",
                        "description": "",
                        "price": 1.5,
                        "quantity": 2,
                        "bpm": 120,
                    }
                ],
                "somethingElse": True,
            },
            "version": 0,
        },
    )

    (item,) = make_store().items

    assert item.id == "music-1"
    assert item.quantity == 2
    assert item.price == Decimal("1.5")
    assert item.image_url is None
    assert item.artist is None


def test_unreadable_record_loads_as_empty_cart(
    make_store, session, profile_id
) -> None:
    from artistconnect.models.client_storage import ClientStorageEntry

    session.add(
        ClientStorageEntry(
            profile_id=profile_id, storage_key="artist-connect-cart", value="{not json"
        )
    )
    session.commit()

    cart = make_store()
    assert cart.is_empty()

    cart.add_item(make_entry("prod-1"))
    assert json.loads(
        session.get(ClientStorageEntry, (profile_id, "artist-connect-cart")).value
    )["state"]["items"][0]["id"] == "prod-1"


def test_invalid_entries_are_skipped(make_store, storage_repo, session, profile_id) -> None:
    storage_repo.set_json(
        session,
        profile_id,
        "artist-connect-cart",
        {
            "state": {
                "items": [
                    {"type": "product", "id": "ok", "name": "Ok", "price": 2, "quantity": 1},
                    {"type": "product", "id": "zero", "name": "Zero", "price": 2, "quantity": 0},
                    {"type": "donation", "id": "bad", "name": "Bad", "price": 2, "quantity": 1},
                ]
            },
            "version": 0,
        },
    )

    assert [it.id for it in make_store().items] == ["ok"]


def test_carts_are_scoped_per_profile(cart_repo, session) -> None:
    import uuid

    from artistconnect.services.cart_service import CartStore

    alice = CartStore(cart_repo, session, uuid.uuid4())
    bob = CartStore(cart_repo, session, uuid.uuid4())
    alice.add_item(make_entry("prod-1"))

    assert bob.is_empty()
    assert CartStore(cart_repo, session, alice.profile_id).get_cart_item_count() == 1
