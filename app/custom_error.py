from fastapi import HTTPException, status


class ProviderError(HTTPException):
    """Stripe rejected or failed a call; detail carries Stripe's own message"""

    def __init__(self, error_detail_message: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_detail_message)


class ServerError(HTTPException):
    def __init__(self, error_detail_message: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_detail_message)


# ---------------------------------------------------------------------------------------------------------------------
# signature verification failures. These never leave the server: the webhook route collapses all of them into an empty 400


class SignatureVerificationError(Exception):
    reason = "signature_verification_failed"

    def __init__(self, message: str, sig_header: str = None):
        super().__init__(message)
        self.sig_header = sig_header


class SignatureInvalidError(SignatureVerificationError):
    reason = "signature_invalid"


class SignatureMismatchError(SignatureVerificationError):
    reason = "signature_mismatch"


class TimestampOutsideToleranceError(SignatureVerificationError):
    reason = "timestamp_outside_tolerance"
