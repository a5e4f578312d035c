from typing import Any, Dict, Optional


class PricingError(Exception):
    """Base class for every error raised by the pricing core."""

    code = "pricing_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(PricingError):
    """Malformed or out-of-range numeric/date input."""

    code = "invalid_input"


class UnknownReferenceError(InvalidInputError):
    """A hotel, room type or service id that is not in the catalog."""

    code = "not_found"


class CurrencyMismatchError(PricingError):
    code = "currency_mismatch"


class ConfigurationError(PricingError):
    """Tier table, tax rate or settings that cannot be used for pricing."""

    code = "configuration_error"
