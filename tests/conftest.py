"""
Shared pytest fixtures.

The settings object is built when app.configs.app_settings is first imported, so the
environment (and a throwaway static directory) has to be in place before anything
under app/ is imported. Stripe is never called: the provider dependency is swapped
for FakeStripeProvider, which records every call and can be told to fail.
"""

import os
import tempfile
from pathlib import Path

STATIC_DIR = Path(tempfile.mkdtemp(prefix="signup-static-"))
(STATIC_DIR / "index.html").write_text("<!DOCTYPE html><html><body>Subscribe</body></html>")
(STATIC_DIR / "script.js").write_text("console.log('client');")

os.environ.update(
    {
        "STRIPE_SECRET_KEY": "sk_test_123",
        "STRIPE_PUBLISHABLE_KEY": "pk_test",
        "STRIPE_WEBHOOK_SECRET": "whsec_test",
        "SUBSCRIPTION_PLAN_ID": "plan_X",
        "STATIC_DIR": str(STATIC_DIR),
        "WEBHOOK_TOLERANCE_SECONDS": "300",
    }
)

import pytest  # noqa: E402
import stripe  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.configs.stripe_config import StripeProvider, get_stripe_provider  # noqa: E402
from app.main import app  # noqa: E402
from app.routes.stripe_webhook_route import get_clock  # noqa: E402
from app.utils.webhook_signature import compute_signature  # noqa: E402

WEBHOOK_SECRET = "whsec_test"
NOW = 1600000000


def generate_test_header(payload, secret=WEBHOOK_SECRET, timestamp=NOW, scheme="v1"):
    """Stripe-Signature header built the way Stripe builds it"""
    return f"t={timestamp},{scheme}={compute_signature(payload, secret, timestamp)}"


class FakeStripeProvider(StripeProvider):
    """
    In-memory stand-in for Stripe.

    Set `fail_on` to an operation name ("update_customer", ...) to make that call
    raise an InvalidRequestError. Webhook verification is inherited untouched.
    """

    def __init__(self):
        super().__init__(WEBHOOK_SECRET, webhook_tolerance=300)
        self.calls = []
        self.fail_on = set()

    def _record(self, operation, **params):
        self.calls.append((operation, params))
        if operation in self.fail_on:
            raise stripe.InvalidRequestError(f"No such customer: '{params.get('customer_id')}'", param="customer")

    def operations(self):
        return [operation for operation, _ in self.calls]

    def retrieve_plan(self, plan_id):
        self._record("retrieve_plan", plan_id=plan_id)
        return stripe.Plan.construct_from(
            {"id": plan_id, "object": "plan", "amount": 2000, "currency": "aud", "interval": "month"}, "sk_test_123"
        )

    def create_customer(self, name, email):
        self._record("create_customer", name=name, email=email)
        return stripe.Customer.construct_from({"id": "cus_1", "object": "customer", "name": name, "email": email}, "sk_test_123")

    def update_customer(self, customer_id, **fields):
        self._record("update_customer", customer_id=customer_id, **fields)
        return stripe.Customer.construct_from({"id": customer_id, "object": "customer", **fields}, "sk_test_123")

    def create_setup_intent(self, customer_id, payment_method_types=None):
        self._record("create_setup_intent", customer_id=customer_id, payment_method_types=payment_method_types)
        return stripe.SetupIntent.construct_from(
            {
                "id": "seti_1",
                "object": "setup_intent",
                "customer": customer_id,
                "client_secret": "seti_1_secret_abc",
                "payment_method_types": payment_method_types,
            },
            "sk_test_123",
        )

    def create_subscription(self, customer_id, plan_id):
        self._record("create_subscription", customer_id=customer_id, plan_id=plan_id)
        return stripe.Subscription.construct_from(
            {"id": "sub_1", "object": "subscription", "customer": customer_id, "plan": {"id": plan_id, "object": "plan"}},
            "sk_test_123",
        )


@pytest.fixture
def fake_provider():
    return FakeStripeProvider()


@pytest.fixture
def clock():
    """Mutable time source; set clock.now to move time"""

    class _Clock:
        now = NOW

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def client(fake_provider, clock):
    app.dependency_overrides[get_stripe_provider] = lambda: fake_provider
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
