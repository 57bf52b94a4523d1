import logging
from typing import Optional

import stripe
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from checkout.database import get_db
from checkout.orders import mark_order_paid
from checkout.schemas import WebhookAck
from checkout.stripe_service import StripeGateway, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter()

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


async def raw_body(request: Request) -> bytes:
    # Signature is computed over the exact bytes Stripe sent
    return await request.body()


def webhook_error(message: str) -> PlainTextResponse:
    logger.warning("Webhook error: %s", message)
    return PlainTextResponse(f"Webhook Error: {message}", status_code=400)


@router.post("/webhook", response_model=WebhookAck)
def stripe_webhook(
    payload: bytes = Depends(raw_body),
    stripe_signature: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
):
    if not stripe_signature:
        return webhook_error("Missing stripe-signature header")

    try:
        event = gateway.construct_event(payload, stripe_signature)
    except ValueError as exc:
        return webhook_error(f"Invalid payload: {exc}")
    except stripe.SignatureVerificationError as exc:
        return webhook_error(str(exc))

    if event["type"] == CHECKOUT_SESSION_COMPLETED:
        session = event["data"]["object"]
        try:
            payment_intent_id = session["payment_intent"]
        except KeyError:
            payment_intent_id = None
        mark_order_paid(db, session["id"], payment_intent_id)
    else:
        logger.debug("Ignoring webhook event", extra={"event_type": event["type"]})

    return {"received": True}
