"""Payment processing through Stripe."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

import stripe

from .config import settings
from .errors import PaymentFailedError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Charge:
    """A completed charge as reported by the processor."""

    id: str
    amount: int


def make_idempotency_key(
    user_id: UUID, source: str, lines: Iterable[tuple[UUID, int, int]]
) -> str:
    """
    Derive a stable idempotency key for a checkout.

    Args:
        user_id: The paying user
        source: The payment-method token being charged
        lines: (cart item id, quantity, unit price) for every charged line

    A retry with the same token and cart produces the same key, so it cannot
    charge twice. A new token gives a new key, so a declined card does not
    block paying for the same cart with another one.
    """
    digest = hashlib.sha256(f"{user_id}|{source}".encode())
    for cart_item_id, quantity, price in sorted(lines, key=lambda line: str(line[0])):
        digest.update(f"|{cart_item_id}:{quantity}:{price}".encode())
    return f"checkout-{digest.hexdigest()}"


class StripePaymentProcessor:
    """Charges a tokenised payment source."""

    def __init__(self, api_key: str):
        self.client = stripe.StripeClient(api_key, http_client=stripe.HTTPXClient())

    async def charge(
        self, amount: int, currency: str, source: str, idempotency_key: str | None = None
    ) -> Charge:
        """Create a charge of ``amount`` minor units.

        Raises:
            PaymentFailedError: If the processor declines or cannot be reached
        """
        options = {"idempotency_key": idempotency_key} if idempotency_key else {}
        try:
            result = await self.client.charges.create_async(
                params={"amount": amount, "currency": currency, "source": source},
                options=options,
            )
        except stripe.CardError as e:
            logger.warning("Card declined", amount=amount, code=e.code)
            raise PaymentFailedError(
                e.user_message or "Your card was declined", processor_error=e.code
            ) from e
        except stripe.StripeError as e:
            logger.error("Payment processor error", amount=amount, error=str(e))
            raise PaymentFailedError(
                "The payment could not be processed", processor_error=e.code
            ) from e

        logger.info("Charge created", charge_id=result.id, amount=result.amount)
        return Charge(id=result.id, amount=result.amount)


def get_payment_processor() -> StripePaymentProcessor:
    """Create the payment processor from settings."""
    if not settings.stripe_secret_key:
        raise ValueError("Stripe secret key is required. Set SICKFITS_STRIPE_SECRET_KEY.")
    return StripePaymentProcessor(settings.stripe_secret_key)
