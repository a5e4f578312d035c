from decimal import Decimal

import pytest

from pricing.charges import calculate_services_cost
from pricing.domain import BookingService, LineItem, LineKind, ServiceCharge, ServiceUnitType, StayContext
from pricing.errors import ConfigurationError, CurrencyMismatchError
from pricing.itemize import itemize_booking_cost, room_line_label, tax_label
from pricing.money import Currency, Money
from pricing.room import calculate_room_price


def gbp(amount):
    return Money(amount, Currency.GBP)


@pytest.fixture
def room():
    return calculate_room_price(gbp(12000), 3, guests=2)


@pytest.fixture
def charges():
    services = [
        BookingService("breakfast", "Full English Breakfast", gbp(2000), ServiceUnitType.PER_PERSON_PER_NIGHT),
        BookingService("airport_transfer", "Airport Transfer", gbp(5000), ServiceUnitType.PER_USE, uses=2),
    ]
    result, _ = calculate_services_cost(services, StayContext(3, 2), Currency.GBP)
    return result


def test_itemized_totals(room, charges):
    cost = itemize_booking_cost(room, charges, tax_rate=Decimal("0.20"))

    assert cost.subtotal == gbp(58000)
    assert cost.tax_amount == gbp(11600)
    assert cost.grand_total == gbp(69600)
    assert cost.services_cost == gbp(22000)
    assert [line.kind for line in cost.lines] == [
        LineKind.ROOM, LineKind.SERVICE, LineKind.SERVICE, LineKind.TAX,
    ]


def test_grand_total_is_sum_of_lines(room, charges):
    fees = (LineItem(LineKind.FEE, "Resort fee", gbp(1234)),)
    cost = itemize_booking_cost(room, charges, tax_rate="0.175", fees=fees)
    assert cost.grand_total.amount == sum(line.amount.amount for line in cost.lines)
    assert cost.subtotal == gbp(59234)


def test_line_labels(room, charges):
    cost = itemize_booking_cost(room, charges)
    assert cost.room_line.label == "3 nights @ £120.00 (OFF-PEAK)"
    assert [line.label for line in cost.service_lines] == [
        "Full English Breakfast x6", "Airport Transfer x2",
    ]


def test_no_tax_line_without_tax(room):
    cost = itemize_booking_cost(room)
    assert cost.fee_lines == ()
    assert cost.tax_amount.is_zero()
    assert cost.grand_total == gbp(36000)


def test_itemizing_is_repeatable(room, charges):
    assert itemize_booking_cost(room, charges, "0.2") == itemize_booking_cost(room, charges, "0.2")


def test_currency_mismatch_is_rejected(room):
    fees = (LineItem(LineKind.FEE, "City tax", Money(500, Currency.EUR)),)
    with pytest.raises(CurrencyMismatchError):
        itemize_booking_cost(room, fees=fees)


def test_tax_rate_out_of_range(room):
    with pytest.raises(ConfigurationError):
        itemize_booking_cost(room, tax_rate="1.5")


def test_labels():
    peak = calculate_room_price(gbp(15000), 1, is_peak=True)
    assert room_line_label(peak) == "1 night @ £150.00 (PEAK)"
    assert tax_label(Decimal("0.20")) == "Tax (20%)"
    assert tax_label(Decimal("0.175")) == "Tax (17.5%)"


def test_service_charge_currency_mismatch_is_rejected(room):
    breakfast = BookingService("breakfast", "Breakfast", Money(2000, Currency.EUR),
                               ServiceUnitType.PER_PERSON_PER_NIGHT)
    charge = ServiceCharge(breakfast, 6, Money(12000, Currency.EUR))
    with pytest.raises(CurrencyMismatchError):
        itemize_booking_cost(room, [charge], tax_rate="0.2")
