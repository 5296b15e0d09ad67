import asyncio
import logging
import stripe
from typing import Any, Dict
from app.configs.stripe_config import StripeProvider, SubscriptionConstants
from app.custom_error import ProviderError

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, provider: StripeProvider, plan_id: str):
        self.provider = provider
        self.plan_id = plan_id

    # ######################################################################################################################
    # Helper methods:
    # ######################################################################################################################

    async def _call(self, operation: str, func, *args, **kwargs):
        """Run a blocking Stripe call off the event loop and turn Stripe failures into ProviderError"""
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            logger.error(f"❌ Stripe {operation} failed: {message}")
            raise ProviderError(message)

    # ---------------------------------------------------------------------------------------------------------------------

    async def get_config(self, publishable_key: str) -> Dict[str, Any]:
        """Publishable key plus the full plan, everything the client needs to render the widget"""
        plan = await self._call("retrieve plan", self.provider.retrieve_plan, self.plan_id)
        return {"publishableKey": publishable_key, "plan": plan.to_dict()}

    # ---------------------------------------------------------------------------------------------------------------------

    async def create_customer(self, name: str, email: str) -> Dict[str, Any]:
        """Create the customer, then a setup intent bound to it for later off-session charges"""
        customer = await self._call("create customer", self.provider.create_customer, name, email)
        logger.info(f"✅ Customer created: {customer.id}")

        # if this fails the customer stays in Stripe, orphans are harmless there and nothing is rolled back
        setup_intent = await self._call(
            "create setup intent",
            self.provider.create_setup_intent,
            customer.id,
            SubscriptionConstants.SETUP_INTENT_PAYMENT_METHOD_TYPES,
        )
        logger.info(f"✅ Setup intent {setup_intent.id} created for customer {customer.id}")

        return {"customer": customer.to_dict(), "setupIntent": setup_intent.to_dict()}

    # ---------------------------------------------------------------------------------------------------------------------

    async def create_subscription(self, customer_id: str, payment_method_id: str) -> Dict[str, Any]:
        """Make the payment method the customer's invoice default, then subscribe them to the plan"""

        # the first invoice is charged against the default payment method, so it has to be in place first.
        # a failure here raises and the subscription is never attempted
        await self._call(
            "update customer",
            self.provider.update_customer,
            customer_id,
            invoice_settings={"default_payment_method": payment_method_id},
        )

        subscription = await self._call("create subscription", self.provider.create_subscription, customer_id, self.plan_id)
        logger.info(f"✅ Subscription {subscription.id} created for customer {customer_id}")

        return subscription.to_dict()
