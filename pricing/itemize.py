from decimal import Decimal
from typing import Sequence

from .domain import ItemizedBookingCost, LineItem, LineKind, RoomPriceCalculation, ServiceCharge
from .errors import ConfigurationError, CurrencyMismatchError
from .money import Number, sum_money, to_decimal


def room_line_label(room: RoomPriceCalculation) -> str:
    label = f"{room.nights} night{'s' if room.nights != 1 else ''} @ {room.applied_rate.format()}"
    label += " (PEAK)" if room.is_peak else " (OFF-PEAK)"
    if room.extra_guests:
        label += f" + {room.extra_guests} extra guest{'s' if room.extra_guests != 1 else ''}"
    return label


def tax_label(tax_rate: Decimal) -> str:
    percent = (tax_rate * 100).normalize()
    return f"Tax ({percent:f}%)"


def itemize_booking_cost(
    room: RoomPriceCalculation,
    charges: Sequence[ServiceCharge] = (),
    tax_rate: Number = Decimal("0"),
    fees: Sequence[LineItem] = (),
) -> ItemizedBookingCost:
    """Compose room, service and fee lines into one itemized total.

    Every line must be in the room line's currency; this is checked before
    any amount is added. Tax is charged on the subtotal of all other lines
    and appears as its own line, so the grand total is the sum of `lines`.
    """
    currency = room.total.currency
    mismatched = [
        amount.currency.value
        for amount in [charge.amount for charge in charges] + [fee.amount for fee in fees]
        if amount.currency != currency
    ]
    if mismatched:
        raise CurrencyMismatchError(
            f"All lines must be in {currency.value}",
            {"expected": currency.value, "got": sorted(set(mismatched))},
        )

    rate = to_decimal(tax_rate, "tax_rate")
    if not (Decimal(0) <= rate <= Decimal(1)):
        raise ConfigurationError("Tax rate must be between 0 and 1", {"tax_rate": str(rate)})

    room_line = LineItem(LineKind.ROOM, room_line_label(room), room.total)
    service_lines = tuple(
        LineItem(LineKind.SERVICE, f"{charge.service.name} x{charge.quantity}", charge.amount)
        for charge in charges
    )
    fee_lines = tuple(fees)

    subtotal = sum_money(
        [room_line.amount] + [line.amount for line in service_lines + fee_lines], currency
    )
    tax_amount = subtotal.scale(rate)
    if rate:
        fee_lines = fee_lines + (LineItem(LineKind.TAX, tax_label(rate), tax_amount),)

    grand_total = sum_money(
        [room_line.amount] + [line.amount for line in service_lines + fee_lines], currency
    )

    return ItemizedBookingCost(
        currency=currency,
        room=room,
        room_line=room_line,
        services=tuple(charges),
        service_lines=service_lines,
        fee_lines=fee_lines,
        subtotal=subtotal,
        tax_rate=rate,
        tax_amount=tax_amount,
        grand_total=grand_total,
    )
