"""Mobile-wallet payment mocks (JazzCash, Easypaisa).

No wallet provider is contacted. Each call waits to imitate the provider
round trip and hands back a synthetic transaction id.
"""

import asyncio
import random
import time
from dataclasses import dataclass
from enum import Enum

from storefront.config import get_settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class Wallet(Enum):
    JAZZCASH = "JC"
    EASYPAISA = "EP"


@dataclass(frozen=True)
class WalletReceipt:
    success: bool
    transaction_id: str
    message: str = "Payment processed successfully"


def transaction_id(wallet: Wallet) -> str:
    return f"{wallet.value}{int(time.time() * 1000)}{random.randint(0, 999):03d}"


async def charge_wallet(wallet: Wallet, amount: float, phone_number: str | None = None) -> WalletReceipt:
    await asyncio.sleep(get_settings().wallet_delay_seconds)

    receipt = WalletReceipt(success=True, transaction_id=transaction_id(wallet))
    logger.info(
        "Wallet payment simulated",
        wallet=wallet.name,
        amount=amount,
        phone_number=phone_number,
        transaction_id=receipt.transaction_id,
    )
    return receipt


async def verify_transaction(payment_method: str | None, transaction_id: str | None) -> dict:
    await asyncio.sleep(get_settings().verify_delay_seconds)
    logger.info("Wallet transaction verified", payment_method=payment_method, transaction_id=transaction_id)
    return {"success": True, "verified": True, "transaction_id": transaction_id}
