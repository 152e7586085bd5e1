from types import SimpleNamespace
from unittest.mock import patch
import json

import pytest
import stripe
from fastapi import HTTPException

from models import ShoppingItem, StripeConfiguration, StripeSessionCompleted, StripeSessionFailed
from service_modules.base import Caller
from service_modules.qr_service import decode_qr_payload, encode_qr_payload, qr_service, render_qr_png
from service_modules.stripe_service import stripe_service

from conftest import create_member

TEST_KEY = "sk_test_" + "x" * 24


def test_qr_payload_round_trip():
    payload = encode_qr_payload(42)
    assert payload.startswith("GYMQR:42:")
    assert decode_qr_payload(payload) == 42


@pytest.mark.parametrize("bad", ["", "hello", "GYMQR:42", "GYMQR:abc:0000", "GYMQR:43:" + "0" * 16])
def test_qr_rejects_bad_payloads(bad):
    with pytest.raises(HTTPException) as exc:
        decode_qr_payload(bad)
    assert exc.value.detail == "Invalid QR code"


def test_tampered_member_id_is_rejected():
    signature = encode_qr_payload(42).split(":")[2]
    with pytest.raises(HTTPException):
        decode_qr_payload(f"GYMQR:43:{signature}")


def test_render_png():
    assert render_qr_png(encode_qr_payload(1))[:8] == b"\x89PNG\r\n\x1a\n"


def test_member_qr_and_front_desk_validation(admin):
    member = create_member(admin).member
    me = Caller(member_id=member.id)

    qr = qr_service.get_my_qr_code(me)
    assert qr == qr_service.generate_qr_code(me, member.id)
    assert qr_service.validate_qr_code(admin, qr) == member.id

    with pytest.raises(HTTPException) as exc:
        qr_service.validate_qr_code(me, qr)
    assert exc.value.status_code == 403


def test_stripe_not_configured_by_default():
    assert stripe_service.is_stripe_configured() is False
    with pytest.raises(HTTPException) as exc:
        stripe_service.create_checkout_session(
            Caller(), [ShoppingItem(product_name="Monthly", price_in_cents=150000, quantity=1)], "http://ok", "http://no"
        )
    assert exc.value.detail == "Stripe is not configured"


def test_placeholder_key_rejected(admin):
    with pytest.raises(HTTPException) as exc:
        stripe_service.set_stripe_configuration(admin, StripeConfiguration(secret_key="your_stripe_key"))
    assert exc.value.status_code == 400


def test_create_checkout_session(admin):
    stripe_service.set_stripe_configuration(admin, StripeConfiguration(secret_key=TEST_KEY, allowed_countries=["in"]))
    assert stripe_service.is_stripe_configured()

    fake = SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")
    with patch("stripe.checkout.Session.create", return_value=fake) as create:
        result = stripe_service.create_checkout_session(
            admin, [ShoppingItem(product_name="Monthly", price_in_cents=150000, quantity=1)], "http://ok", "http://no"
        )

    assert json.loads(result) == {"id": "cs_test_1", "url": fake.url}
    kwargs = create.call_args.kwargs
    assert kwargs["api_key"] == TEST_KEY
    assert kwargs["client_reference_id"] == admin.principal
    assert kwargs["shipping_address_collection"] == {"allowed_countries": ["IN"]}
    assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 150000


def test_checkout_stripe_error_is_bad_gateway(admin):
    stripe_service.set_stripe_configuration(admin, StripeConfiguration(secret_key=TEST_KEY))
    with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("card declined")):
        with pytest.raises(HTTPException) as exc:
            stripe_service.create_checkout_session(
                admin, [ShoppingItem(product_name="Monthly", price_in_cents=100, quantity=1)], "http://ok", "http://no"
            )
    assert exc.value.status_code == 502


def test_session_status(admin):
    stripe_service.set_stripe_configuration(admin, StripeConfiguration(secret_key=TEST_KEY))

    paid = SimpleNamespace(id="cs_1", payment_status="paid", status="complete", client_reference_id="p-1")
    with patch("stripe.checkout.Session.retrieve", return_value=paid):
        status = stripe_service.get_stripe_session_status("cs_1")
    assert isinstance(status, StripeSessionCompleted)
    assert status.user_principal == "p-1"

    open_session = SimpleNamespace(id="cs_2", payment_status="unpaid", status="open", client_reference_id=None)
    with patch("stripe.checkout.Session.retrieve", return_value=open_session):
        status = stripe_service.get_stripe_session_status("cs_2")
    assert isinstance(status, StripeSessionFailed)
