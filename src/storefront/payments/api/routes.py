"""FastAPI endpoints for card payment intents and the mobile-wallet mocks."""

from fastapi import APIRouter, Depends, HTTPException

from storefront.config import get_settings
from storefront.identity.guards import admin_user, current_user
from storefront.identity.user import User
from storefront.payments.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
    WalletPaymentRequest,
    WalletPaymentResponse,
)
from storefront.payments.gateway import get_gateway
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import PaymentGatewayError, to_minor_units
from storefront.payments.wallets import Wallet, charge_wallet, verify_transaction

payment_router = APIRouter(prefix="/payment", tags=["payments"])


@payment_router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    user: User = Depends(current_user),
) -> PaymentIntentResponse:
    try:
        intent = get_gateway().create_payment_intent(
            amount=to_minor_units(body.amount),
            currency=body.currency.lower(),
            metadata={"user_id": str(user.id)},
        )
    except PaymentGatewayError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return PaymentIntentResponse(client_secret=intent.client_secret)


async def _wallet_payment(wallet: Wallet, body: WalletPaymentRequest) -> WalletPaymentResponse:
    receipt = await charge_wallet(wallet, body.amount, body.phone_number)
    return WalletPaymentResponse(
        success=receipt.success,
        transaction_id=receipt.transaction_id,
        message=receipt.message,
    )


@payment_router.post("/jazzcash", response_model=WalletPaymentResponse)
async def jazzcash(body: WalletPaymentRequest, _user: User = Depends(current_user)) -> WalletPaymentResponse:
    return await _wallet_payment(Wallet.JAZZCASH, body)


@payment_router.post("/easypaisa", response_model=WalletPaymentResponse)
async def easypaisa(body: WalletPaymentRequest, _user: User = Depends(current_user)) -> WalletPaymentResponse:
    return await _wallet_payment(Wallet.EASYPAISA, body)


@payment_router.post("/verify", response_model=VerifyPaymentResponse)
async def verify(body: VerifyPaymentRequest, _user: User = Depends(current_user)) -> VerifyPaymentResponse:
    return VerifyPaymentResponse(**await verify_transaction(body.payment_method, body.transaction_id))


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(
    body: ConfigureGatewayRequest,
    _admin: User = Depends(admin_user),
) -> GatewayConfigResponse:
    """Toggle the fake gateway between success and failure (non-production only)."""
    if get_settings().is_production:
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
