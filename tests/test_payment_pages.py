"""Tests for the payment-success / payment-failure terminal pages."""
from __future__ import annotations

import pytest

from artistconnect.schemas.payment import PaymentContext
from artistconnect.services.payment_pages import (
    CONNECT_FAILURE_REASONS,
    GENERIC_SUCCESS_DESCRIPTION,
    GENERIC_SUCCESS_TITLE,
    PAYMENT_FAILURE_REASONS,
    PaymentPagesService,
)
from conftest import make_entry


@pytest.fixture
def pages(context_repo) -> PaymentPagesService:
    return PaymentPagesService(context_repo)


def test_success_clears_cart(pages, make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    cart.add_item(make_entry("gig-1", kind="gig"))

    pages.payment_success(cart)

    assert make_store().is_empty()


@pytest.mark.parametrize(
    ("kind", "title", "next_href"),
    [
        ("product", "Order Confirmed!", "/account/products"),
        ("music", "Music Purchase Complete!", "/music"),
        ("gig", "Gig Booked Successfully!", "/bookings"),
    ],
)
def test_success_copy_follows_cart_contents(pages, make_store, kind, title, next_href) -> None:
    cart = make_store()
    cart.add_item(make_entry("a", kind=kind))
    cart.add_item(make_entry("b", kind=kind))

    page = pages.payment_success(cart)

    assert page.kind == kind
    assert page.title == title
    assert page.next_step.href == next_href


def test_mixed_cart_gets_generic_confirmation(pages, make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    cart.add_item(make_entry("music-1", kind="music"))

    page = pages.payment_success(cart)

    assert page.kind is None
    assert page.title == GENERIC_SUCCESS_TITLE


def test_reloading_success_page_is_harmless(pages, make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    first = pages.payment_success(cart)

    second = pages.payment_success(make_store())

    assert first.title == "Order Confirmed!"
    assert second.kind is None
    assert second.title == GENERIC_SUCCESS_TITLE
    assert second.description == GENERIC_SUCCESS_DESCRIPTION
    assert second.next_step is None


def test_success_on_empty_cart_without_context(pages, make_store) -> None:
    page = pages.payment_success(make_store())

    assert page.title == GENERIC_SUCCESS_TITLE
    assert page.home.href == "/"


def test_donation_context_is_consumed(pages, make_store, context_repo, session, profile_id) -> None:
    context_repo.set(
        session, profile_id, PaymentContext(type="donation", artist_id="artist-1", amount=2500)
    )

    page = pages.payment_success(make_store())

    assert page.title == "Thank You for Your Support!"
    assert "$25.00" in page.description
    assert page.next_step.href == "/artists/artist-1"
    assert page.note.startswith("100% of your donation")
    assert context_repo.get(session, profile_id) is None


def test_donation_without_amount(pages, make_store, context_repo, session, profile_id) -> None:
    context_repo.set(session, profile_id, PaymentContext(type="donation"))

    page = pages.payment_success(make_store())

    assert page.description == (
        "Your donation has been received. Thank you for supporting this artist!"
    )
    assert page.next_step is None


def test_stripe_connect_return(pages, make_store) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))

    page = pages.payment_success(cart, code="ac_123", state="xyz")

    assert page.kind == "stripe-connect"
    assert page.title == "Stripe Account Connected!"
    assert page.next_step.href == "/account/dashboard"


def test_failure_keeps_cart_and_context(pages, make_store, context_repo, session, profile_id) -> None:
    cart = make_store()
    cart.add_item(make_entry("prod-1"))
    context_repo.set(session, profile_id, PaymentContext(type="product", product_id="prod-1"))

    page = pages.payment_failure(cart)

    assert page.title == "Payment Failed"
    assert page.reasons == PAYMENT_FAILURE_REASONS
    assert page.retry.href == "/store/prod-1"
    assert page.retry.label == "Return to Product"
    assert make_store().get_cart_item_count() == 1
    assert context_repo.get(session, profile_id).product_id == "prod-1"


@pytest.mark.parametrize(
    ("context", "href", "label"),
    [
        (None, "/", "Try Again"),
        (PaymentContext(type="product"), "/store", "Return to Product"),
        (PaymentContext(type="music"), "/music", "Return to Music Library"),
        (PaymentContext(type="gig", gig_id="gig-9"), "/gigs/gig-9", "Return to Gig"),
        (PaymentContext(type="gig"), "/", "Return to Gig"),
        (PaymentContext(type="donation", artist_id="a-1"), "/artists/a-1", "Try Donation Again"),
        (PaymentContext(type="cart"), "/cart", "Return to Cart"),
    ],
)
def test_failure_retry_links(pages, make_store, context_repo, session, profile_id, context, href, label) -> None:
    if context is not None:
        context_repo.set(session, profile_id, context)

    page = pages.payment_failure(make_store())

    assert page.retry.href == href
    assert page.retry.label == label


def test_failed_stripe_connect(pages, make_store) -> None:
    page = pages.payment_failure(make_store(), error="access_denied")

    assert page.kind == "stripe-connect"
    assert page.title == "Connection Failed"
    assert page.reasons == CONNECT_FAILURE_REASONS
    assert page.retry.href == "/stripe-connect"
