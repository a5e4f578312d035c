from typing import Iterable, Optional, Tuple

from .domain import BookingService, ServiceCharge, ServiceUnitType, StayContext
from .errors import ConfigurationError, InvalidInputError
from .money import Currency, Money, sum_money


def _require_count(value: Optional[int], field: str) -> int:
    if value is None:
        raise InvalidInputError(f"{field} is required", {"field": field})
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInputError(f"{field} must be a non-negative integer", {"field": field, "value": value})
    return value


def charge_quantity(service: BookingService, context: StayContext) -> int:
    """Multiplier applied to the unit price for the service's unit type."""
    unit_type = service.unit_type
    if unit_type is ServiceUnitType.PER_NIGHT:
        return _require_count(context.nights, "nights")
    if unit_type is ServiceUnitType.PER_PERSON:
        return _require_count(context.guests, "guests")
    if unit_type is ServiceUnitType.PER_PERSON_PER_NIGHT:
        return _require_count(context.guests, "guests") * _require_count(context.nights, "nights")
    if unit_type is ServiceUnitType.PER_USE:
        return _require_count(service.uses, "uses")
    if unit_type is ServiceUnitType.FLAT:
        return 1
    raise ConfigurationError(f"Unsupported service unit type: {unit_type!r}",
                             {"service_id": service.service_id})


def calculate_service_charge(service: BookingService, context: StayContext) -> ServiceCharge:
    if service.unit_price.is_negative():
        raise InvalidInputError(
            f"Unit price of {service.name} cannot be negative",
            {"service_id": service.service_id},
        )
    quantity = charge_quantity(service, context)
    return ServiceCharge(
        service=service,
        quantity=quantity,
        amount=service.unit_price.times(quantity),
    )


def calculate_services_cost(
    services: Iterable[BookingService],
    context: StayContext,
    currency: Currency,
) -> Tuple[Tuple[ServiceCharge, ...], Money]:
    """Itemize `services` and total them in `currency`."""
    charges = tuple(calculate_service_charge(service, context) for service in services)
    return charges, sum_money((charge.amount for charge in charges), currency)
