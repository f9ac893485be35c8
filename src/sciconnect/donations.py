"""Donations to scientist causes through an external payment provider."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from .directory import DirectoryStore

logger = logging.getLogger("sciconnect")

MIN_AMOUNT = 1


class PaymentError(RuntimeError):
    """Raised by payment providers for any failed order or capture."""


def clamp_amount(raw: Any) -> int:
    """Coerce user input to a whole amount of at least ``MIN_AMOUNT``."""
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return MIN_AMOUNT
    if not math.isfinite(value):
        return MIN_AMOUNT
    return max(MIN_AMOUNT, int(value))


class PaymentProvider(Protocol):
    def create_order(
        self,
        amount: int,
        currency: str,
        description: str,
        cause_id: str,
    ) -> str: ...

    def capture(self, order_id: str) -> str: ...


class SandboxPaymentProvider:
    """In-memory provider for demos and tests.

    ``fail_on`` may be ``"create"`` or ``"capture"`` to simulate provider errors.
    """

    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.fail_on = fail_on
        self.orders: Dict[str, Dict[str, Any]] = {}

    def create_order(
        self,
        amount: int,
        currency: str,
        description: str,
        cause_id: str,
    ) -> str:
        if self.fail_on == "create":
            raise PaymentError("Sandbox rejected the order.")
        order_id = f"ORDER-{uuid.uuid4().hex[:12].upper()}"
        self.orders[order_id] = {
            "amount": amount,
            "currency": currency,
            "description": description,
            "cause_id": cause_id,
            "status": "CREATED",
        }
        return order_id

    def capture(self, order_id: str) -> str:
        if self.fail_on == "capture":
            raise PaymentError("Capture failed.")
        order = self.orders.get(order_id)
        if order is None:
            raise PaymentError(f"Unknown order {order_id}")
        order["status"] = "COMPLETED"
        return f"CAPTURE-{uuid.uuid4().hex[:12].upper()}"


@dataclass(frozen=True)
class DonationResult:
    status: str
    amount: int
    cause_id: str
    confirmation_id: Optional[str] = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == "completed"


class DonationService:
    def __init__(
        self,
        directory: DirectoryStore,
        provider: PaymentProvider,
        currency: str = "USD",
    ) -> None:
        self.directory = directory
        self.provider = provider
        self.currency = currency

    def donate(self, cause_id: str, raw_amount: Any) -> DonationResult:
        amount = clamp_amount(raw_amount)
        cause = self.directory.describe_cause(cause_id)
        description = f"Donation to {cause.name}"
        try:
            order_id = self.provider.create_order(amount, self.currency, description, cause_id)
            confirmation = self.provider.capture(order_id)
        except Exception as exc:
            logger.exception("Donation failed (%s %s to %s)", amount, self.currency, cause_id)
            return DonationResult(
                status="failed",
                amount=amount,
                cause_id=cause_id,
                message=f"Payment error: {exc}",
            )
        logger.info(
            "Donation complete: %s (%s %s to %s)",
            confirmation,
            amount,
            self.currency,
            cause_id,
        )
        return DonationResult(
            status="completed",
            amount=amount,
            cause_id=cause_id,
            confirmation_id=confirmation,
            message=f"Thank you! Donation complete: {confirmation}",
        )
