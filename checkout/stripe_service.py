from typing import Any, Dict, List, Optional

import stripe
from fastapi import Request

from checkout.money import to_minor_units
from checkout.schemas import CartProduct


class StripeGateway:
    """Stripe calls made by the service, bound to one account's keys."""

    def __init__(self, api_key: str, webhook_secret: str):
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        customer_email: str,
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None,
    ):
        return stripe.checkout.Session.create(
            api_key=self.api_key,
            payment_method_types=["card"],
            line_items=line_items,
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            billing_address_collection="auto",
            customer_email=customer_email,
            metadata=metadata or {},
        )

    def construct_event(self, payload: bytes, sig_header: str):
        return stripe.Webhook.construct_event(payload, sig_header, self.webhook_secret)


def build_line_items(products: List[CartProduct], currency: str) -> List[Dict[str, Any]]:
    line_items = []
    for product in products:
        product_data: Dict[str, Any] = {"name": product.dish}
        if product.imgdata:
            product_data["images"] = [product.imgdata]

        line_items.append({
            "price_data": {
                "currency": currency,
                "product_data": product_data,
                "unit_amount": to_minor_units(product.price, currency),
            },
            "quantity": product.qnty,
        })
    return line_items


def get_gateway(request: Request) -> StripeGateway:
    return request.app.state.stripe_gateway
