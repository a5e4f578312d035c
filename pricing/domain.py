from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

from .money import Currency, Money


class ServiceUnitType(str, Enum):
    PER_NIGHT = "per_night"
    PER_PERSON = "per_person"
    PER_PERSON_PER_NIGHT = "per_person_per_night"
    PER_USE = "per_use"
    FLAT = "flat"


class ServiceCategory(str, Enum):
    TRANSFER = "transfer"
    FOOD = "food"
    WELLNESS = "wellness"
    OTHER = "other"


class CancellationFeeType(str, Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"
    NIGHTS = "nights"
    TIERED = "tiered"


class LineKind(str, Enum):
    ROOM = "room"
    SERVICE = "service"
    FEE = "fee"
    TAX = "tax"


# Catalog


@dataclass(frozen=True)
class Hotel:
    id: str
    name: str
    city: str = ""


@dataclass(frozen=True)
class RoomTypeDefinition:
    id: str
    hotel_id: str
    name: str
    capacity: int
    price_off_peak: Money
    price_peak: Optional[Money] = None
    description: str = ""

    @property
    def currency(self) -> Currency:
        return self.price_off_peak.currency


@dataclass(frozen=True)
class PeakSeason:
    id: str
    hotel_id: str
    name: str
    start_date: date
    end_date: date
    multiplier: Decimal = Decimal("1.0")
    is_active: bool = True


@dataclass(frozen=True)
class ServiceDefinition:
    id: str
    name: str
    price: Money
    unit_type: ServiceUnitType
    category: ServiceCategory = ServiceCategory.OTHER
    is_active: bool = True


# Room pricing


@dataclass(frozen=True)
class OccupancyPolicy:
    """Guests above `base_occupancy` pay `extra_guest_surcharge` per night."""

    base_occupancy: int
    extra_guest_surcharge: Money


@dataclass(frozen=True)
class RoomPriceCalculation:
    base_rate: Money
    applied_rate: Money
    is_peak: bool
    nights: int
    guests: int
    extra_guests: int
    surcharge_per_night: Money
    room_subtotal: Money
    surcharge_total: Money
    total: Money

    @property
    def currency(self) -> Currency:
        return self.total.currency


# Services


@dataclass(frozen=True)
class StayContext:
    nights: int
    guests: int


@dataclass(frozen=True)
class BookingService:
    """An add-on attached to a booking; `uses` drives per-use pricing."""

    service_id: str
    name: str
    unit_price: Money
    unit_type: ServiceUnitType
    uses: Optional[int] = None
    category: ServiceCategory = ServiceCategory.OTHER

    @classmethod
    def from_definition(cls, definition: ServiceDefinition, uses: Optional[int] = None) -> "BookingService":
        return cls(
            service_id=definition.id,
            name=definition.name,
            unit_price=definition.price,
            unit_type=definition.unit_type,
            uses=uses,
            category=definition.category,
        )


@dataclass(frozen=True)
class ServiceCharge:
    service: BookingService
    quantity: int
    amount: Money


# Cancellation policies


@dataclass(frozen=True)
class FlatFee:
    amount: Money

    @property
    def fee_type(self) -> CancellationFeeType:
        return CancellationFeeType.FLAT


@dataclass(frozen=True)
class PercentageFee:
    percent: Decimal

    @property
    def fee_type(self) -> CancellationFeeType:
        return CancellationFeeType.PERCENTAGE


@dataclass(frozen=True)
class NightsFee:
    """Fee expressed in first-night prices; 0.5 is half the first night."""

    nights: Decimal

    @property
    def fee_type(self) -> CancellationFeeType:
        return CancellationFeeType.NIGHTS


FeeRule = Union[FlatFee, PercentageFee, NightsFee]


@dataclass(frozen=True)
class CancellationTier:
    min_days_before: int
    rule: FeeRule
    description: str = ""


@dataclass(frozen=True)
class TieredFee:
    tiers: Tuple[CancellationTier, ...]

    @property
    def fee_type(self) -> CancellationFeeType:
        return CancellationFeeType.TIERED


CancellationPolicy = Union[FlatFee, PercentageFee, NightsFee, TieredFee]


@dataclass(frozen=True)
class CancellationFeeCalculation:
    fee_type: CancellationFeeType
    fee: Money
    refundable: Money
    days_before_checkin: int
    fee_percentage: Decimal
    description: str
    tier: Optional[CancellationTier] = None

    @property
    def currency(self) -> Currency:
        return self.fee.currency


# Itemized cost


@dataclass(frozen=True)
class LineItem:
    kind: LineKind
    label: str
    amount: Money


@dataclass(frozen=True)
class ItemizedBookingCost:
    currency: Currency
    room: RoomPriceCalculation
    room_line: LineItem
    services: Tuple[ServiceCharge, ...]
    service_lines: Tuple[LineItem, ...]
    fee_lines: Tuple[LineItem, ...]
    subtotal: Money
    tax_rate: Decimal
    tax_amount: Money
    grand_total: Money

    @property
    def lines(self) -> Tuple[LineItem, ...]:
        return (self.room_line,) + self.service_lines + self.fee_lines

    @property
    def services_cost(self) -> Money:
        total = Money.zero(self.currency)
        for line in self.service_lines:
            total = total + line.amount
        return total
