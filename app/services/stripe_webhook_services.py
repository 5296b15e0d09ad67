import json
import logging
import stripe
from typing import Callable, Dict, Optional, Union
from app.configs.stripe_config import StripeProvider

logger = logging.getLogger(__name__)

# Billing events worth reviewing: https://stripe.com/docs/billing/webhooks
# Most of them are recognized and acknowledged without any work yet, which keeps the provider from retrying them.


class StripeWebhookService:
    def __init__(self, provider: StripeProvider):
        self.provider = provider
        self._handlers: Dict[str, Callable[[stripe.StripeObject], None]] = {
            "customer.created": self.handle_customer_created,
            "customer.updated": self._acknowledge,
            "setup_intent.created": self._acknowledge,
            "invoice.upcoming": self._acknowledge,
            "invoice.created": self._acknowledge,
            "invoice.finalized": self._acknowledge,
            "invoice.payment_succeeded": self._acknowledge,
            "invoice.payment_failed": self._acknowledge,
            "customer.subscription.created": self.handle_subscription_created,
        }

    def verify_signature(self, payload: Union[bytes, str], sig_header: Optional[str], now=None):
        """Signature errors propagate untouched so the route can reject the delivery"""
        return self.provider.verify_signature(payload, sig_header, now=now)

    def decode_event(self, payload: Union[bytes, str]) -> stripe.Event:
        return self.provider.decode_event(payload)

    # --------------------------------------------------------------------------------------------------------------------

    def dispatch(self, event: stripe.Event) -> bool:
        """Run the handler for the event type. Returns False when the type fell through to the default branch"""
        event_type = event.type
        logger.info(f"🔔 Received Stripe webhook: {event_type} ({event.id})")

        handler = self._handlers.get(event_type)
        if handler is None:
            logger.info(f"⚠️ Unhandled webhook event type: {event_type}")
            return False

        handler(event.data.object)
        return True

    # --------------------------------------------------------------------------------------------------------------------

    def _acknowledge(self, data_object: stripe.StripeObject):
        logger.debug(f"Acknowledged {getattr(data_object, 'object', None)} {getattr(data_object, 'id', None)}")

    def handle_customer_created(self, customer: stripe.StripeObject):
        """Handle customer.created webhook event"""
        logger.info(f"✅ Successfully created customer: {getattr(customer, 'id', None)}")

    def handle_subscription_created(self, subscription: stripe.StripeObject):
        """Handle customer.subscription.created webhook event: the subscription goes to stdout as JSON"""
        print(json.dumps(subscription.to_dict(), indent=2), flush=True)
        logger.info(f"✅ Successfully created subscription: {getattr(subscription, 'id', None)}")
