from fastapi import APIRouter, Depends
from typing import Any, Dict
from app.configs.app_settings import settings
from app.configs.stripe_config import StripeProvider, get_stripe_provider
from app.services.subscription_services import SubscriptionService
from app.models.subscription_models import (
    ConfigResponse,
    CreateCustomerRequest,
    CreateCustomerResponse,
    CreateSubscriptionRequest,
)

subscription_router = APIRouter(tags=["Subscriptions"])


def get_subscription_service(provider: StripeProvider = Depends(get_stripe_provider)) -> SubscriptionService:
    """Dependency to get SubscriptionService instance"""
    return SubscriptionService(provider, settings.SUBSCRIPTION_PLAN_ID)


#########################################################################################################################


@subscription_router.get("/config", response_model=ConfigResponse)
async def get_config(subscription_service: SubscriptionService = Depends(get_subscription_service)):
    """Publishable key and plan for bootstrapping the payment widget"""
    return await subscription_service.get_config(settings.STRIPE_PUBLISHABLE_KEY)


# ---------------------------------------------------------------------------------------------------------------------


@subscription_router.post("/create-customer", response_model=CreateCustomerResponse)
async def create_customer(request: CreateCustomerRequest, subscription_service: SubscriptionService = Depends(get_subscription_service)):
    """Create a customer and a setup intent for collecting their payment method"""
    return await subscription_service.create_customer(name=request.name, email=request.email)


# ---------------------------------------------------------------------------------------------------------------------


@subscription_router.post("/subscription", response_model=Dict[str, Any])
async def create_subscription(
    request: CreateSubscriptionRequest,
    subscription_service: SubscriptionService = Depends(get_subscription_service),
):
    """Attach the default payment method and subscribe the customer to the plan"""
    return await subscription_service.create_subscription(customer_id=request.customer_id, payment_method_id=request.payment_method_id)
