from decimal import Decimal

import pytest

from pricing.config import DEFAULT_SEED_PATH, Settings, load_settings
from pricing.errors import ConfigurationError
from pricing.money import Currency, Money


def test_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.tax_rate == Decimal("0.20")
    assert settings.seed_path == DEFAULT_SEED_PATH
    assert settings.occupancy_policy is None


def test_values_from_environment():
    settings = load_settings({
        "PRICING_CURRENCY": "usd",
        "PRICING_TAX_RATE": "0.0875",
        "PRICING_BASE_OCCUPANCY": "3",
        "PRICING_EXTRA_GUEST_SURCHARGE": "15",
        "PRICING_MAX_STAY_NIGHTS": "14",
        "PRICING_SEED_PATH": "/tmp/seed.json",
        "PRICING_LOG_LEVEL": "debug",
    })
    assert settings.currency is Currency.USD
    assert settings.tax_rate == Decimal("0.0875")
    assert settings.max_stay_nights == 14
    assert settings.seed_path == "/tmp/seed.json"
    assert settings.log_level == "DEBUG"

    policy = settings.occupancy_policy
    assert policy.base_occupancy == 3
    assert policy.extra_guest_surcharge == Money(1500, Currency.USD)


@pytest.mark.parametrize("environ", [
    {"PRICING_CURRENCY": "XYZ"},
    {"PRICING_TAX_RATE": "1.5"},
    {"PRICING_TAX_RATE": "twenty"},
    {"PRICING_BASE_OCCUPANCY": "two"},
    {"PRICING_BASE_OCCUPANCY": "0"},
    {"PRICING_MAX_STAY_NIGHTS": "-1"},
    {"PRICING_EXTRA_GUEST_SURCHARGE": "-5"},
])
def test_invalid_values(environ):
    with pytest.raises(ConfigurationError):
        load_settings(environ)


def test_blank_values_use_defaults():
    assert load_settings({"PRICING_TAX_RATE": " ", "PRICING_MAX_STAY_NIGHTS": ""}) == Settings()
