import logging

import stripe
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from checkout.config import Settings, get_settings
from checkout.database import get_db
from checkout.errors import EMAIL_REQUIRED, ApiError
from checkout.orders import create_pending_order
from checkout.schemas import CheckoutRequest, CheckoutSessionResponse
from checkout.stripe_service import StripeGateway, build_line_items, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/create-checkout-session", response_model=CheckoutSessionResponse)
def create_checkout_session(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    if not request.email:
        raise ApiError(400, EMAIL_REQUIRED)
    if not request.products:
        raise ApiError(400, "Cart is empty")

    line_items = build_line_items(request.products, settings.currency)
    metadata = {
        key: value
        for key, value in (
            ("customer_name", request.customer_name),
            ("customer_address", request.customer_address),
        )
        if value
    }

    try:
        session = gateway.create_checkout_session(
            line_items=line_items,
            customer_email=request.email,
            success_url=settings.success_url,
            cancel_url=settings.cancel_url,
            metadata=metadata,
        )
    except stripe.StripeError as exc:
        logger.exception("Stripe session error")
        raise ApiError(500, exc.user_message or "Payment processor request failed") from exc
    except Exception as exc:
        logger.exception("Checkout session request failed")
        raise ApiError(500, "Payment processor request failed") from exc

    logger.info("Checkout session created", extra={"stripe_session_id": session.id})

    try:
        create_pending_order(
            db,
            email=request.email,
            products=request.products,
            line_items=line_items,
            currency=settings.currency,
            stripe_session_id=session.id,
            customer_name=request.customer_name,
            customer_address=request.customer_address,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        # The Stripe session stays open with no local order behind it
        logger.exception("Could not record order", extra={"stripe_session_id": session.id})
        raise ApiError(500, "Could not record order") from exc

    return {"id": session.id}
