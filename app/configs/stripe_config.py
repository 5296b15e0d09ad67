import json
import stripe
from typing import Any, Dict, List, Optional, Union
from app.configs.app_settings import settings
from app.models.stripe_webhook_models import SignatureHeader, StripeEvent
from app.utils.webhook_signature import verify_header

stripe.api_key = settings.STRIPE_SECRET_KEY
# no automatic retries on our side, Stripe's own idempotency is all we rely on
stripe.max_network_retries = 0
stripe.default_http_client = stripe.RequestsClient(timeout=settings.STRIPE_API_TIMEOUT_SECONDS)
stripe.set_app_info(
    "stripe-samples/subscriptions-with-card-and-direct-debit",
    version="0.0.1",
    url="https://github.com/stripe-samples/subscriptions-with-card-and-direct-debit",
)


class SubscriptionConstants:
    # payment methods the setup intent may collect: cards and Australian BECS direct debit
    SETUP_INTENT_PAYMENT_METHOD_TYPES = ["card", "au_becs_debit"]
    # the first invoice's payment intent comes back inline so the client can confirm it
    SUBSCRIPTION_EXPAND = ["latest_invoice.payment_intent"]


class StripeProvider:
    """Thin wrapper over the Stripe calls the signup flow and webhook need. Every method is a blocking HTTP call"""

    def __init__(self, webhook_secret: str, webhook_tolerance: Optional[int] = 300):
        self.webhook_secret = webhook_secret
        self.webhook_tolerance = webhook_tolerance

    def retrieve_plan(self, plan_id: str) -> stripe.Plan:
        return stripe.Plan.retrieve(plan_id)

    def create_customer(self, name: str, email: str) -> stripe.Customer:
        return stripe.Customer.create(name=name, email=email)

    def update_customer(self, customer_id: str, **fields: Any) -> stripe.Customer:
        """Partial update, e.g. invoice_settings={"default_payment_method": "pm_..."}"""
        return stripe.Customer.modify(customer_id, **fields)

    def create_setup_intent(self, customer_id: str, payment_method_types: Optional[List[str]] = None) -> stripe.SetupIntent:
        return stripe.SetupIntent.create(
            payment_method_types=payment_method_types or SubscriptionConstants.SETUP_INTENT_PAYMENT_METHOD_TYPES,
            customer=customer_id,
        )

    def create_subscription(self, customer_id: str, plan_id: str) -> stripe.Subscription:
        return stripe.Subscription.create(
            customer=customer_id,
            items=[{"plan": plan_id}],
            expand=SubscriptionConstants.SUBSCRIPTION_EXPAND,
        )

    def verify_signature(self, payload: Union[bytes, str], sig_header: Optional[str], now=None) -> SignatureHeader:
        """Raises a SignatureVerificationError subclass when the delivery is not authentic"""
        return verify_header(payload, sig_header, self.webhook_secret, tolerance=self.webhook_tolerance, now=now)

    def decode_event(self, payload: Union[bytes, str]) -> stripe.Event:
        """Decode an already verified body. Raises ValueError on bad JSON or a malformed envelope"""
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        data: Dict[str, Any] = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("Event payload must be a JSON object")
        # pydantic ValidationError is a ValueError too, so a malformed envelope reads the same as bad JSON
        StripeEvent.model_validate(data)

        # construct_from turns every nested dict carrying an "object" field into its typed class
        # (Customer, Invoice, Subscription, ...). Unknown kinds stay a plain StripeObject.
        return stripe.Event.construct_from(data, stripe.api_key)


_stripe_provider = StripeProvider(settings.STRIPE_WEBHOOK_SECRET, settings.WEBHOOK_TOLERANCE_SECONDS)


def get_stripe_provider() -> StripeProvider:
    """Dependency function to get the shared Stripe provider"""
    return _stripe_provider
