from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Optional


class StripeEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    # polymorphic; the "object" key inside says which kind (customer, invoice, subscription, ...)
    object: Dict[str, Any]
    previous_attributes: Optional[Dict[str, Any]] = None


class StripeEvent(BaseModel):
    """Envelope of a signed event as Stripe posts it"""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    created: Optional[int] = None
    livemode: Optional[bool] = None
    api_version: Optional[str] = None
    data: StripeEventData


class SignatureHeader(BaseModel):
    """Parsed Stripe-Signature header: the signing timestamp and every signature for our scheme"""

    timestamp: int
    signatures: List[str] = []
