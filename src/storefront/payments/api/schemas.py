"""Pydantic request/response schemas for the Payments API."""

from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"amount": 2495.5, "currency": "pkr"}]}}

    amount: float = Field(..., gt=0)
    currency: str = Field("pkr", min_length=3, max_length=3)


class PaymentIntentResponse(BaseModel):
    client_secret: str


class WalletPaymentRequest(BaseModel):
    amount: float = Field(..., gt=0)
    phone_number: str | None = Field(None, max_length=20)


class WalletPaymentResponse(BaseModel):
    success: bool
    transaction_id: str
    message: str


class VerifyPaymentRequest(BaseModel):
    payment_method: str | None = None
    transaction_id: str | None = None


class VerifyPaymentResponse(BaseModel):
    success: bool
    verified: bool
    transaction_id: str | None = None


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Card declined"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
