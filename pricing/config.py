"""Environment-driven settings for the pricing service.

Every value has a default so the service starts with no environment at
all. Invalid values raise ConfigurationError at load time rather than
surfacing later as pricing errors.
"""
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from .domain import OccupancyPolicy
from .errors import ConfigurationError, InvalidInputError
from .money import Currency, Money, parse_currency, to_decimal

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_SEED_PATH = os.path.join(PROJECT_ROOT, "data", "seed.json")


@dataclass(frozen=True)
class Settings:
    currency: Currency = Currency.GBP
    tax_rate: Decimal = Decimal("0.20")
    base_occupancy: int = 2
    extra_guest_surcharge: Decimal = Decimal("0")
    max_stay_nights: int = 30
    seed_path: str = DEFAULT_SEED_PATH
    log_level: str = "INFO"

    @property
    def occupancy_policy(self) -> Optional[OccupancyPolicy]:
        """Occupancy surcharge policy, or None when no surcharge is configured."""
        if not self.extra_guest_surcharge:
            return None
        return OccupancyPolicy(
            base_occupancy=self.base_occupancy,
            extra_guest_surcharge=Money.of(self.extra_guest_surcharge, self.currency),
        )


def _env_int(environ: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")
    return value


def _env_decimal(environ: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return to_decimal(raw.strip(), name)
    except InvalidInputError as e:
        raise ConfigurationError(e.message)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from `environ` (defaults to os.environ)."""
    environ = os.environ if environ is None else environ

    try:
        currency = parse_currency(environ.get("PRICING_CURRENCY", Currency.GBP.value))
    except InvalidInputError as e:
        raise ConfigurationError(e.message)

    tax_rate = _env_decimal(environ, "PRICING_TAX_RATE", Decimal("0.20"))
    if not (Decimal(0) <= tax_rate <= Decimal(1)):
        raise ConfigurationError(f"PRICING_TAX_RATE must be between 0 and 1, got {tax_rate}")

    surcharge = _env_decimal(environ, "PRICING_EXTRA_GUEST_SURCHARGE", Decimal("0"))
    if surcharge < 0:
        raise ConfigurationError("PRICING_EXTRA_GUEST_SURCHARGE cannot be negative")

    return Settings(
        currency=currency,
        tax_rate=tax_rate,
        base_occupancy=_env_int(environ, "PRICING_BASE_OCCUPANCY", 2, minimum=1),
        extra_guest_surcharge=surcharge,
        max_stay_nights=_env_int(environ, "PRICING_MAX_STAY_NIGHTS", 30, minimum=1),
        seed_path=environ.get("PRICING_SEED_PATH") or DEFAULT_SEED_PATH,
        log_level=(environ.get("PRICING_LOG_LEVEL") or "INFO").upper(),
    )
