import hashlib
import hmac
import time
from typing import Callable, Dict, List, Optional, Union
from app.custom_error import SignatureInvalidError, SignatureMismatchError, TimestampOutsideToleranceError
from app.models.stripe_webhook_models import SignatureHeader

# Stripe signs every webhook delivery and sends the result in the Stripe-Signature header:
#   Stripe-Signature: t=1600000000,v1=5257a869e7ecebeda32affa62cdca3fa51cad7e77a0e56ff536d0ce8e108d8bd[,v1=...]
# - t is the unix timestamp Stripe used when signing
# - v1 is the hex HMAC-SHA256 of "{t}.{raw body}" keyed with the endpoint's signing secret
# - more than one v1 shows up while a signing secret is being rolled, any one of them matching is enough
# - other schemes (v0 is a test-mode scheme) are ignored
#
# the HMAC must be computed over the exact bytes received on the wire, never over re-encoded JSON,
# so the route hands us `await request.body()` untouched.

SIGNATURE_SCHEME = "v1"
DEFAULT_TOLERANCE = 300


def parse_header(sig_header: Optional[str]) -> Dict[str, List[str]]:
    """Split a signature header into {name: [values]}, keeping every repeated value"""
    params: Dict[str, List[str]] = {}
    if not sig_header:
        return params

    for element in sig_header.split(","):
        name, sep, value = element.strip().partition("=")
        if not sep:
            continue
        params.setdefault(name.strip(), []).append(value.strip())

    return params


def parse_signature_header(sig_header: Optional[str], scheme: str = SIGNATURE_SCHEME) -> SignatureHeader:
    """Parse the header and pull out the timestamp and the signatures for our scheme"""
    if not sig_header:
        raise SignatureInvalidError("No signatures found with expected scheme", sig_header)

    params = parse_header(sig_header)

    # plain ascii digits only: int() would also take "+1600000000", "1_600_000_000" or non-ascii digits
    timestamps = params.get("t", [])
    if not timestamps or not (timestamps[0].isascii() and timestamps[0].isdigit()):
        raise SignatureInvalidError("Unable to extract timestamp and signatures from header", sig_header)
    timestamp = int(timestamps[0])

    signatures = [sig for sig in params.get(scheme, []) if sig]
    if not signatures:
        raise SignatureInvalidError("No signatures found with expected scheme", sig_header)

    return SignatureHeader(timestamp=timestamp, signatures=signatures)


def compute_signature(payload: Union[bytes, str], secret: str, timestamp: int) -> str:
    """Lowercase hex HMAC-SHA256 of "{timestamp}.{payload}" keyed with the signing secret"""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    signed_payload = f"{timestamp}.".encode("utf-8") + payload
    return hmac.new(secret.encode("utf-8"), msg=signed_payload, digestmod=hashlib.sha256).hexdigest()


def verify_header(
    payload: Union[bytes, str],
    sig_header: Optional[str],
    secret: str,
    tolerance: Optional[int] = DEFAULT_TOLERANCE,
    now: Optional[Callable[[], float]] = None,
) -> SignatureHeader:
    """
    Verify a Stripe-Signature header against the raw payload.

    Order matters: header first, then the HMAC, then the replay window. The caller must not
    tell the client which one failed. `tolerance` of None or 0 skips the replay window check.
    """
    header = parse_signature_header(sig_header)
    expected = compute_signature(payload, secret, header.timestamp)

    # compare_digest keeps the comparison constant-time, never use == here
    if not any(hmac.compare_digest(expected.encode("utf-8"), sig.encode("utf-8")) for sig in header.signatures):
        raise SignatureMismatchError("No signatures found matching the expected signature for payload", sig_header)

    if tolerance:
        current_time = (now or time.time)()
        if abs(current_time - header.timestamp) > tolerance:
            raise TimestampOutsideToleranceError(f"Timestamp outside the tolerance zone ({header.timestamp})", sig_header)

    return header
