from django.core.exceptions import ValidationError

INVALID_CODE = "invalid_code"
INACTIVE = "inactive"
EXPIRED = "expired"
NOT_APPLICABLE = "not_applicable"
BELOW_MINIMUM = "below_minimum"

REASON_MESSAGES = {
    INVALID_CODE: "Invalid discount code.",
    INACTIVE: "This discount code is not active.",
    EXPIRED: "This discount code has expired.",
    NOT_APPLICABLE: "This discount code is not applicable to any products in your cart.",
    BELOW_MINIMUM: "This discount requires a minimum order amount of {minimum}.",
}


class DiscountRejected(ValidationError):
    """A manual code cannot be used for this cart. ``code`` holds the reason."""

    def __init__(self, reason: str, **params):
        message = REASON_MESSAGES.get(reason, reason).format(**params)
        super().__init__(message, code=reason)
        self.reason = reason


class DiscountNotFound(Exception):
    pass


class DiscountStoreUnavailable(Exception):
    """The record store failed; callers may retry."""
