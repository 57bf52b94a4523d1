import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from checkout.models import Order, OrderItem, OrderStatus
from checkout.money import order_total
from checkout.schemas import CartProduct

logger = logging.getLogger(__name__)


def create_pending_order(
    db: Session,
    email: str,
    products: List[CartProduct],
    line_items: List[Dict[str, Any]],
    currency: str,
    stripe_session_id: str,
    customer_name: Optional[str] = None,
    customer_address: Optional[str] = None,
) -> Order:
    amount = order_total(
        (item["price_data"]["unit_amount"], item["quantity"]) for item in line_items
    )

    order = Order(
        email=email,
        amount=amount,
        currency=currency,
        customer_name=customer_name,
        customer_address=customer_address,
        stripe_session_id=stripe_session_id,
        status=OrderStatus.PENDING,
        items=[
            OrderItem(
                position=position,
                name=product.dish,
                quantity=product.qnty,
                price=product.price,
                image=product.imgdata,
            )
            for position, product in enumerate(products)
        ],
    )

    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info(
        "Pending order recorded",
        extra={"order_id": order.id, "stripe_session_id": stripe_session_id, "amount": amount},
    )
    return order


def mark_order_paid(db: Session, stripe_session_id: str, payment_intent_id: Optional[str]) -> bool:
    """
    Set the order for ``stripe_session_id`` to PAID in a single UPDATE.

    Returns False when no order matches; repeating the call for the same
    session leaves the order unchanged.
    """
    result = db.execute(
        update(Order)
        .where(Order.stripe_session_id == stripe_session_id)
        .values(status=OrderStatus.PAID, payment_intent_id=payment_intent_id)
    )
    db.commit()

    if result.rowcount == 0:
        logger.warning("No order for completed session", extra={"stripe_session_id": stripe_session_id})
        return False

    logger.info(
        "Order marked as PAID",
        extra={"stripe_session_id": stripe_session_id, "payment_intent_id": payment_intent_id},
    )
    return True
