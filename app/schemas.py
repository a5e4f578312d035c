from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from pricing.domain import (
    CancellationFeeCalculation, ItemizedBookingCost, LineItem, RoomPriceCalculation,
    RoomTypeDefinition, ServiceCharge, ServiceDefinition,
)
from pricing.errors import InvalidInputError
from pricing.money import Money, format_price_per_night
from pricing.report import price_range
from pricing.service import PricingEstimate


class EstimateItem(BaseModel):
    hotel_id: str
    room_type_id: str
    check_in: str
    check_out: str
    guests: int = 1
    services: List[str] = Field(default_factory=list)  # "id" or "id:uses"
    is_peak: Optional[bool] = None


class CancellationFeeRequest(BaseModel):
    hotel_id: str
    check_in: Optional[str] = None
    cancellation_date: str
    first_night_price: Optional[Decimal] = None
    total_booking_price: Decimal
    currency: Optional[str] = None


def parse_service_specs(specs: List[str]) -> Tuple[Tuple[str, Optional[int]], ...]:
    """Parse "spa_access" / "airport_transfer:2" into (id, uses) pairs."""
    parsed = []
    for spec in specs:
        spec = spec.strip()
        if not spec:
            continue
        service_id, _, uses = spec.partition(':')
        if not uses:
            parsed.append((service_id, None))
            continue
        try:
            parsed.append((service_id, int(uses)))
        except ValueError:
            raise InvalidInputError(f"Invalid usage count for {service_id}: {uses!r}",
                                    {"service_id": service_id})
    return tuple(parsed)


def money_to_dict(amount: Optional[Money]) -> Optional[Dict[str, Any]]:
    if amount is None:
        return None
    return {
        "amount_minor": amount.amount,
        "amount": str(amount.to_decimal()),
        "currency": amount.currency.value,
        "display": amount.format(),
    }


def line_to_dict(line: LineItem) -> Dict[str, Any]:
    return {"kind": line.kind.value, "label": line.label, "amount": money_to_dict(line.amount)}


def room_price_to_dict(room: RoomPriceCalculation) -> Dict[str, Any]:
    return {
        "base_rate": money_to_dict(room.base_rate),
        "applied_rate": money_to_dict(room.applied_rate),
        "is_peak": room.is_peak,
        "nights": room.nights,
        "guests": room.guests,
        "extra_guests": room.extra_guests,
        "surcharge_per_night": money_to_dict(room.surcharge_per_night),
        "room_subtotal": money_to_dict(room.room_subtotal),
        "surcharge_total": money_to_dict(room.surcharge_total),
        "total": money_to_dict(room.total),
    }


def service_charge_to_dict(charge: ServiceCharge) -> Dict[str, Any]:
    return {
        "service_id": charge.service.service_id,
        "service_name": charge.service.name,
        "unit_type": charge.service.unit_type.value,
        "price_per_unit": money_to_dict(charge.service.unit_price),
        "quantity": charge.quantity,
        "total_cost": money_to_dict(charge.amount),
    }


def itemized_to_dict(cost: ItemizedBookingCost) -> Dict[str, Any]:
    return {
        "currency": cost.currency.value,
        "room": room_price_to_dict(cost.room),
        "services": [service_charge_to_dict(charge) for charge in cost.services],
        "services_cost": money_to_dict(cost.services_cost),
        "lines": [line_to_dict(line) for line in cost.lines],
        "subtotal": money_to_dict(cost.subtotal),
        "tax_rate": str(cost.tax_rate),
        "tax_amount": money_to_dict(cost.tax_amount),
        "total_cost": money_to_dict(cost.grand_total),
    }


def room_type_to_dict(room: RoomTypeDefinition) -> Dict[str, Any]:
    return {
        "id": room.id,
        "hotel_id": room.hotel_id,
        "name": room.name,
        "capacity": room.capacity,
        "price_off_peak": money_to_dict(room.price_off_peak),
        "price_peak": money_to_dict(room.price_peak),
        "price_per_night": format_price_per_night(room.price_off_peak),
        "price_range": price_range(room)["range"],
    }


def service_definition_to_dict(service: ServiceDefinition) -> Dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name,
        "price": money_to_dict(service.price),
        "unit_type": service.unit_type.value,
        "category": service.category.value,
    }


def estimate_to_dict(estimate: PricingEstimate) -> Dict[str, Any]:
    return {
        "hotel_id": estimate.request.hotel_id,
        "check_in": str(estimate.request.check_in),
        "check_out": str(estimate.request.check_out),
        "room_type": room_type_to_dict(estimate.room_type),
        "itemized": itemized_to_dict(estimate.itemized),
    }


def cancellation_to_dict(result: CancellationFeeCalculation) -> Dict[str, Any]:
    return {
        "fee_type": result.fee_type.value,
        "fee_amount": money_to_dict(result.fee),
        "refund_amount": money_to_dict(result.refundable),
        "fee_percentage": str(result.fee_percentage),
        "days_before_checkin": result.days_before_checkin,
        "description": result.description,
        "currency": result.currency.value,
        "applicable_tier": (
            {"min_days_before": result.tier.min_days_before,
             "fee_type": result.tier.rule.fee_type.value,
             "description": result.tier.description}
            if result.tier is not None else None
        ),
    }
