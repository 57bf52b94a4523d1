from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartProduct(BaseModel):
    dish: str
    imgdata: Optional[str] = None
    price: float = Field(ge=0, allow_inf_nan=False)
    qnty: int = Field(gt=0)


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so a missing email is reported as "Email is required"
    email: Optional[str] = None
    customer_name: Optional[str] = Field(None, alias="customerName")
    customer_address: Optional[str] = Field(None, alias="customerAddress")
    products: List[CartProduct] = Field(default_factory=list)


class CheckoutSessionResponse(BaseModel):
    id: str


class WebhookAck(BaseModel):
    received: bool = True
