"""Stripe payment gateway adapter."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings, get_settings
from app.models.user import User

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The gateway rejected a request or is not configured."""


class WebhookSignatureError(PaymentGatewayError):
    """A webhook payload failed signature verification."""


@dataclass
class IntentResult:
    id: str
    client_secret: Optional[str]
    status: str
    latest_charge: Optional[str] = None
    failure_message: Optional[str] = None


@dataclass
class PaymentMethodDetails:
    id: str
    type: str
    brand: Optional[str] = None
    bank_name: Optional[str] = None
    last4: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None


def intent_result(intent: Any) -> IntentResult:
    last_error = intent.get("last_payment_error") or {}
    return IntentResult(
        id=intent["id"],
        client_secret=intent.get("client_secret"),
        status=intent["status"],
        latest_charge=intent.get("latest_charge"),
        failure_message=last_error.get("message"),
    )


class PaymentGateway:
    """Customers, payment/setup intents and refunds through Stripe."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _configure(self) -> None:
        if not self.settings.stripe_secret_key:
            raise PaymentGatewayError("Payment processing is not configured")
        stripe.api_key = self.settings.stripe_secret_key

    async def _call(self, func, **params):
        self._configure()
        try:
            return await run_in_threadpool(func, **params)
        except stripe.StripeError as e:
            logger.error(f"[PAYMENTS] Stripe error: {e.user_message or e}")
            raise PaymentGatewayError(e.user_message or str(e)) from e

    async def get_or_create_customer(self, user: User) -> str:
        """Return the user's Stripe customer id, creating the customer when missing or deleted."""
        if user.stripe_customer_id:
            try:
                customer = await self._call(stripe.Customer.retrieve, id=user.stripe_customer_id)
                if not customer.get("deleted"):
                    return customer["id"]
            except PaymentGatewayError:
                logger.warning(f"[PAYMENTS] Customer {user.stripe_customer_id} not retrievable, recreating")

        customer = await self._call(
            stripe.Customer.create,
            email=user.email,
            name=user.full_name,
            metadata={"user_id": str(user.id)},
        )
        return customer["id"]

    async def create_payment_intent(
        self,
        amount_cents: int,
        customer_id: str,
        metadata: dict[str, str],
    ) -> IntentResult:
        intent = await self._call(
            stripe.PaymentIntent.create,
            amount=amount_cents,
            currency="usd",
            customer=customer_id,
            metadata=metadata,
            automatic_payment_methods={"enabled": True},
        )
        return intent_result(intent)

    async def retrieve_payment_intent(self, intent_id: str) -> IntentResult:
        intent = await self._call(stripe.PaymentIntent.retrieve, id=intent_id)
        return intent_result(intent)

    async def create_setup_intent(self, customer_id: str) -> IntentResult:
        intent = await self._call(
            stripe.SetupIntent.create,
            customer=customer_id,
            automatic_payment_methods={"enabled": True},
        )
        return IntentResult(id=intent["id"], client_secret=intent.get("client_secret"), status=intent["status"])

    async def retrieve_payment_method(self, payment_method_id: str) -> PaymentMethodDetails:
        pm = await self._call(stripe.PaymentMethod.retrieve, id=payment_method_id)
        details = PaymentMethodDetails(id=pm["id"], type=pm["type"])
        if pm["type"] == "card" and pm.get("card"):
            card = pm["card"]
            details.brand = card.get("brand")
            details.last4 = card.get("last4")
            details.exp_month = card.get("exp_month")
            details.exp_year = card.get("exp_year")
        elif pm["type"] == "us_bank_account" and pm.get("us_bank_account"):
            bank = pm["us_bank_account"]
            details.bank_name = bank.get("bank_name")
            details.last4 = bank.get("last4")
        return details

    async def refund(self, payment_intent_id: str, amount_cents: Optional[int] = None) -> str:
        params: dict[str, Any] = {"payment_intent": payment_intent_id}
        if amount_cents:
            params["amount"] = amount_cents
        refund = await self._call(stripe.Refund.create, **params)
        return refund["id"]

    def construct_event(self, payload: bytes, sig_header: str) -> Any:
        """Verify and parse a webhook payload."""
        if not self.settings.stripe_webhook_secret:
            raise PaymentGatewayError("Webhook secret not configured")
        try:
            return stripe.Webhook.construct_event(payload, sig_header, self.settings.stripe_webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise WebhookSignatureError("Invalid signature") from e


def get_payment_gateway() -> PaymentGateway:
    return PaymentGateway()
