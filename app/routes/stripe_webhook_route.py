from fastapi import APIRouter, Request, Depends, Response, status
import logging
import time
from typing import Callable
from app.configs.stripe_config import StripeProvider, get_stripe_provider
from app.services.stripe_webhook_services import StripeWebhookService
from app.custom_error import SignatureVerificationError

stripe_webhook_router = APIRouter(tags=["Webhooks"])
logger = logging.getLogger(__name__)


def get_stripe_webhook_service(provider: StripeProvider = Depends(get_stripe_provider)) -> StripeWebhookService:
    """Dependency to get StripeWebhookService instance"""
    return StripeWebhookService(provider)


def get_clock() -> Callable[[], float]:
    """Time source for the replay window check"""
    return time.time


# ################################################################################################################################

# received -> header parsed -> hmac verified -> tolerance checked -> decoded -> dispatched -> acked
# anything failing up to the tolerance check answers 400 with an empty body, the same for every reason.
# past that point the event is authentic and the answer is always an empty 200.


@stripe_webhook_router.post("/webhook", status_code=status.HTTP_200_OK, response_class=Response)
async def stripe_webhook_handler(
    request: Request,
    webhook_service: StripeWebhookService = Depends(get_stripe_webhook_service),
    clock: Callable[[], float] = Depends(get_clock),
):
    """Handle Stripe webhook events"""
    # raw bytes exactly as received, the signature covers these and not a re-encoded JSON
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")

    try:
        webhook_service.verify_signature(payload, sig_header, now=clock)
    except SignatureVerificationError as e:
        logger.warning(f"⚠️ Webhook signature verification failed ({e.reason}): {str(e)}")
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        event = webhook_service.decode_event(payload)
    except Exception:
        logger.exception("❌ Authentic webhook with undecodable payload")
        return Response(status_code=status.HTTP_200_OK)

    try:
        webhook_service.dispatch(event)
    except Exception:
        logger.exception(f"❌ Error handling webhook event {event.type}")

    return Response(status_code=status.HTTP_200_OK)
