from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict


class CreateCustomerRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)


class CreateSubscriptionRequest(BaseModel):
    # the browser client posts camelCase keys
    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(alias="customerId", min_length=1)
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)


class ConfigResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    publishable_key: str = Field(alias="publishableKey")
    plan: Dict[str, Any]


class CreateCustomerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer: Dict[str, Any]
    setup_intent: Dict[str, Any] = Field(alias="setupIntent")
