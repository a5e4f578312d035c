import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Mapping, Optional, Tuple

from .dates import as_date
from .domain import Hotel, PeakSeason, RoomTypeDefinition, ServiceCategory, ServiceDefinition, ServiceUnitType
from .errors import ConfigurationError, InvalidInputError
from .money import Currency, Money, parse_currency, to_decimal

# Unit type names used by older catalog rows.
UNIT_TYPE_ALIASES = {
    "per_occurrence": ServiceUnitType.PER_USE,
    "per_transfer": ServiceUnitType.PER_USE,
    "per_person_per_day": ServiceUnitType.PER_PERSON_PER_NIGHT,
}


@dataclass(frozen=True)
class PricingCatalog:
    """Immutable pricing data for all hotels."""

    currency: Currency
    hotels: Tuple[Hotel, ...] = ()
    room_types: Tuple[RoomTypeDefinition, ...] = ()
    services: Tuple[ServiceDefinition, ...] = ()
    peak_seasons: Tuple[PeakSeason, ...] = ()
    cancellation_rules: Dict[str, Tuple[Mapping[str, Any], ...]] = field(default_factory=dict)

    @property
    def active_services(self) -> Tuple[ServiceDefinition, ...]:
        return tuple(service for service in self.services if service.is_active)


def load_seed(path: str) -> Dict[str, Any]:
    """Load seed data from JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _money(row: Mapping[str, Any], key: str, currency: Currency, required: bool = True) -> Optional[Money]:
    value = row.get(key)
    if value is None:
        if required:
            raise KeyError(key)
        return None
    row_currency = parse_currency(row.get("currency", currency))
    return Money.of(value, row_currency)


def parse_unit_type(value: str) -> ServiceUnitType:
    name = str(value).lower()
    if name in UNIT_TYPE_ALIASES:
        return UNIT_TYPE_ALIASES[name]
    try:
        return ServiceUnitType(name)
    except ValueError:
        raise ConfigurationError(f"Unknown service unit type: {value!r}")


def parse_room_type(row: Mapping[str, Any], currency: Currency) -> RoomTypeDefinition:
    return RoomTypeDefinition(
        id=str(row["id"]),
        hotel_id=str(row["hotel_id"]),
        name=row["name"],
        capacity=int(row["capacity"]),
        price_off_peak=_money(row, "price_off_peak", currency),
        price_peak=_money(row, "price_peak", currency, required=False),
        description=row.get("description", ""),
    )


def parse_service(row: Mapping[str, Any], currency: Currency) -> ServiceDefinition:
    return ServiceDefinition(
        id=str(row["id"]),
        name=row["name"],
        price=_money(row, "price", currency),
        unit_type=parse_unit_type(row["unit_type"]),
        category=ServiceCategory(row.get("category", ServiceCategory.OTHER.value)),
        is_active=bool(row.get("is_active", True)),
    )


def parse_peak_season(row: Mapping[str, Any]) -> PeakSeason:
    start: date = as_date(row["start_date"], "start_date")
    end: date = as_date(row["end_date"], "end_date")
    if end < start:
        raise ConfigurationError(f"Peak season {row.get('name')!r} ends before it starts")
    return PeakSeason(
        id=str(row.get("id", "")),
        hotel_id=str(row["hotel_id"]),
        name=row.get("name", ""),
        start_date=start,
        end_date=end,
        multiplier=to_decimal(row.get("multiplier", "1.0"), "multiplier"),
        is_active=bool(row.get("is_active", True)),
    )


def group_cancellation_rules(rows) -> Dict[str, Tuple[Mapping[str, Any], ...]]:
    grouped: Dict[str, list] = {}
    for row in rows:
        grouped.setdefault(str(row["hotel_id"]), []).append(dict(row))
    return {hotel_id: tuple(hotel_rows) for hotel_id, hotel_rows in grouped.items()}


def parse_seed_data(seed_data: Dict[str, Any], default_currency: Currency = Currency.GBP) -> PricingCatalog:
    """Parse seed data into a pricing catalog.

    Rows mirror the database tables (`room_types`, `services`,
    `peak_seasons`, `cancellation_fees`); prices are major-unit strings.
    Cancellation rows are kept as rows and turned into policies on use.
    """
    try:
        currency = parse_currency(seed_data.get('currency', default_currency))
        return PricingCatalog(
            currency=currency,
            hotels=tuple(
                Hotel(id=str(h['id']), name=h['name'], city=h.get('city', ''))
                for h in seed_data.get('hotels', [])
            ),
            room_types=tuple(parse_room_type(r, currency) for r in seed_data.get('room_types', [])),
            services=tuple(parse_service(s, currency) for s in seed_data.get('services', [])),
            peak_seasons=tuple(parse_peak_season(p) for p in seed_data.get('peak_seasons', [])),
            cancellation_rules=group_cancellation_rules(seed_data.get('cancellation_fees', [])),
        )
    except (KeyError, TypeError, ValueError, InvalidInputError) as e:
        raise ConfigurationError(f"Invalid seed data: {e}")
