import pytest

from pricing.charges import calculate_service_charge, calculate_services_cost, charge_quantity
from pricing.domain import BookingService, ServiceUnitType, StayContext
from pricing.errors import CurrencyMismatchError, InvalidInputError
from pricing.money import Currency, Money

STAY = StayContext(nights=3, guests=2)


def service(price, unit_type, uses=None, currency=Currency.GBP):
    return BookingService(unit_type.value, unit_type.value.title(), Money(price, currency), unit_type, uses)


@pytest.mark.parametrize("unit_type, price, uses, expected", [
    (ServiceUnitType.PER_NIGHT, 1500, None, 4500),
    (ServiceUnitType.PER_PERSON, 2500, None, 5000),
    (ServiceUnitType.PER_PERSON_PER_NIGHT, 2000, None, 12000),
    (ServiceUnitType.PER_USE, 5000, 2, 10000),
    (ServiceUnitType.FLAT, 4000, None, 4000),
])
def test_charge_by_unit_type(unit_type, price, uses, expected):
    charge = calculate_service_charge(service(price, unit_type, uses), STAY)
    assert charge.amount == Money(expected, Currency.GBP)


def test_flat_quantity_is_one():
    assert charge_quantity(service(4000, ServiceUnitType.FLAT), STAY) == 1


def test_per_use_with_zero_uses_is_free():
    charge = calculate_service_charge(service(5000, ServiceUnitType.PER_USE, 0), STAY)
    assert charge.amount.is_zero()


def test_per_use_requires_uses():
    with pytest.raises(InvalidInputError):
        charge_quantity(service(5000, ServiceUnitType.PER_USE), STAY)
    with pytest.raises(InvalidInputError):
        charge_quantity(service(5000, ServiceUnitType.PER_USE, -1), STAY)


def test_negative_unit_price_is_rejected():
    with pytest.raises(InvalidInputError):
        calculate_service_charge(service(-100, ServiceUnitType.FLAT), STAY)


def test_services_cost_total():
    services = [
        service(2000, ServiceUnitType.PER_PERSON_PER_NIGHT),
        service(5000, ServiceUnitType.PER_USE, 2),
    ]
    charges, total = calculate_services_cost(services, STAY, Currency.GBP)
    assert [charge.quantity for charge in charges] == [6, 2]
    assert total == Money(22000, Currency.GBP)


def test_services_cost_with_no_services():
    charges, total = calculate_services_cost([], STAY, Currency.USD)
    assert charges == ()
    assert total == Money(0, Currency.USD)


def test_services_cost_currency_mismatch():
    services = [service(2000, ServiceUnitType.FLAT, currency=Currency.EUR)]
    with pytest.raises(CurrencyMismatchError):
        calculate_services_cost(services, STAY, Currency.GBP)
