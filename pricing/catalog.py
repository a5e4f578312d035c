from decimal import Decimal
from typing import Any, Dict, Tuple

from .domain import (
    CancellationTier, Hotel, NightsFee, PercentageFee, RoomTypeDefinition, ServiceCategory,
    ServiceDefinition, ServiceUnitType, TieredFee,
)
from .money import Currency, Money
from .transforms import PricingCatalog

DEFAULT_HOTEL_ID = "hotel_1"


def standard_services(currency: Currency = Currency.GBP) -> Tuple[ServiceDefinition, ...]:
    return (
        ServiceDefinition("airport_transfer", "Airport Transfer (One-way)", Money.of("50", currency),
                          ServiceUnitType.PER_USE, ServiceCategory.TRANSFER),
        ServiceDefinition("breakfast", "Full English Breakfast", Money.of("20", currency),
                          ServiceUnitType.PER_PERSON_PER_NIGHT, ServiceCategory.FOOD),
        ServiceDefinition("spa_access", "Spa Access", Money.of("35", currency),
                          ServiceUnitType.PER_PERSON_PER_NIGHT, ServiceCategory.WELLNESS),
        ServiceDefinition("late_checkout", "Late Check-out (until 2 PM)", Money.of("40", currency),
                          ServiceUnitType.FLAT, ServiceCategory.OTHER),
    )


# More than 14 days: free; 3-14 days: half the first night; under 72 hours: the first night.
STANDARD_CANCELLATION_POLICY = TieredFee((
    CancellationTier(15, PercentageFee(Decimal("0")),
                     "More than 14 days before check-in: Free cancellation"),
    CancellationTier(3, NightsFee(Decimal("0.5")),
                     "3-14 days before check-in: 50% of first night stay"),
    CancellationTier(0, NightsFee(Decimal("1")),
                     "Less than 72 hours before check-in: 100% of first night stay"),
))


def standard_cancellation_rows(hotel_id: str) -> Tuple[Dict[str, Any], ...]:
    """The standard policy shaped like `cancellation_fees` rows."""
    return (
        {"id": f"{hotel_id}_free", "hotel_id": hotel_id, "days_before_checkin_min": 15,
         "days_before_checkin_max": 9999, "fee_type": "percentage", "fee_value": "0",
         "description": "More than 14 days before check-in: Free cancellation", "is_active": True},
        {"id": f"{hotel_id}_partial", "hotel_id": hotel_id, "days_before_checkin_min": 3,
         "days_before_checkin_max": 14, "fee_type": "nights", "fee_value": "0.5",
         "description": "3-14 days before check-in: 50% of first night stay", "is_active": True},
        {"id": f"{hotel_id}_full_night", "hotel_id": hotel_id, "days_before_checkin_min": 0,
         "days_before_checkin_max": 2, "fee_type": "nights", "fee_value": "1",
         "description": "Less than 72 hours before check-in: 100% of first night stay",
         "is_active": True},
    )


def standard_catalog(currency: Currency = Currency.GBP) -> PricingCatalog:
    """Fallback catalog used when no seed file is available."""
    hotel_id = DEFAULT_HOTEL_ID
    room_types = (
        RoomTypeDefinition("standard_double", hotel_id, "Standard Double", 2,
                           Money.of("120", currency), Money.of("150", currency)),
        RoomTypeDefinition("deluxe_king", hotel_id, "Deluxe King", 2,
                           Money.of("180", currency), Money.of("220", currency)),
        RoomTypeDefinition("family_suite", hotel_id, "Family Suite", 4,
                           Money.of("250", currency), Money.of("300", currency)),
        RoomTypeDefinition("penthouse", hotel_id, "Penthouse", 4,
                           Money.of("500", currency), Money.of("650", currency)),
    )
    return PricingCatalog(
        currency=currency,
        hotels=(Hotel(hotel_id, "Muraka Hotel", "Bristol"),),
        room_types=room_types,
        services=standard_services(currency),
        peak_seasons=(),
        cancellation_rules={hotel_id: standard_cancellation_rows(hotel_id)},
    )
