from decimal import Decimal

import pytest

from pricing.cancellation import (
    calculate_cancellation_fee, calculate_cancellation_fee_for_dates, fee_percentage, policy_from_rules,
    rule_from_row, validate_policy,
)
from pricing.catalog import STANDARD_CANCELLATION_POLICY, standard_cancellation_rows
from pricing.domain import (
    CancellationFeeType, CancellationTier, FlatFee, NightsFee, PercentageFee, TieredFee,
)
from pricing.errors import ConfigurationError, CurrencyMismatchError, InvalidInputError
from pricing.money import Currency, Money, round_half_up


def usd(amount):
    return Money(amount, Currency.USD)


def gbp(amount):
    return Money(amount, Currency.GBP)


TWO_WEEK_POLICY = TieredFee((
    CancellationTier(14, PercentageFee(Decimal("0"))),
    CancellationTier(7, PercentageFee(Decimal("50"))),
    CancellationTier(0, PercentageFee(Decimal("100"))),
))


def test_tiered_percentage_example():
    result = calculate_cancellation_fee(usd(60000), TWO_WEEK_POLICY, 10)
    assert result.fee == usd(30000)
    assert result.refundable == usd(30000)
    assert result.fee_type is CancellationFeeType.TIERED
    assert result.tier.min_days_before == 7
    assert result.fee_percentage == Decimal("50.00")


def test_flat_fee_is_capped_at_total():
    result = calculate_cancellation_fee(usd(3000), FlatFee(usd(5000)), 5)
    assert result.fee == usd(3000)
    assert result.refundable == usd(0)
    assert result.fee_type is CancellationFeeType.FLAT


def test_percentage_rounds_half_up():
    result = calculate_cancellation_fee(gbp(999), PercentageFee(Decimal("50")), 3)
    assert result.fee == gbp(500)
    assert result.refundable == gbp(499)


def test_fee_and_refund_add_up_to_total():
    for total in (0, 1, 999, 12345, 60000):
        for percent in ("0", "12.5", "33", "50", "99.99", "100"):
            result = calculate_cancellation_fee(gbp(total), PercentageFee(Decimal(percent)), 1)
            assert result.fee.amount == round_half_up(Decimal(total) * Decimal(percent) / 100)
            assert result.fee + result.refundable == gbp(total)
            assert not result.refundable.is_negative()


def test_fee_never_increases_with_more_notice():
    fees = [
        calculate_cancellation_fee(gbp(36000), STANDARD_CANCELLATION_POLICY, days, gbp(12000)).fee
        for days in range(-3, 31)
    ]
    assert all(later <= earlier for earlier, later in zip(fees, fees[1:]))


def test_after_checkin_uses_least_notice_tier():
    result = calculate_cancellation_fee(usd(60000), TWO_WEEK_POLICY, -2)
    assert result.fee == usd(60000)
    assert result.tier.min_days_before == 0


def test_standard_policy_charges_first_night_fractions():
    free = calculate_cancellation_fee(gbp(36000), STANDARD_CANCELLATION_POLICY, 20, gbp(12000))
    half = calculate_cancellation_fee(gbp(36000), STANDARD_CANCELLATION_POLICY, 10, gbp(12000))
    full = calculate_cancellation_fee(gbp(36000), STANDARD_CANCELLATION_POLICY, 1, gbp(12000))

    assert free.fee == gbp(0)
    assert half.fee == gbp(6000)
    assert half.fee_percentage == Decimal("16.67")
    assert half.description == "3-14 days before check-in: 50% of first night stay"
    assert full.fee == gbp(12000)
    assert full.refundable == gbp(24000)


def test_nights_fee_requires_first_night():
    with pytest.raises(InvalidInputError):
        calculate_cancellation_fee(gbp(36000), NightsFee(Decimal("1")), 1)


def test_nights_fee_currency_must_match():
    with pytest.raises(CurrencyMismatchError):
        calculate_cancellation_fee(gbp(36000), NightsFee(Decimal("1")), 1, usd(12000))


def test_flat_fee_currency_must_match():
    with pytest.raises(CurrencyMismatchError):
        calculate_cancellation_fee(gbp(36000), FlatFee(usd(5000)), 1)


def test_description_without_tier_text():
    result = calculate_cancellation_fee(usd(60000), TWO_WEEK_POLICY, 10)
    assert result.description == "10 days before check-in: 50% charge"


def test_invalid_inputs():
    with pytest.raises(InvalidInputError):
        calculate_cancellation_fee(gbp(-1), PercentageFee(Decimal("10")), 5)
    with pytest.raises(InvalidInputError):
        calculate_cancellation_fee(gbp(100), PercentageFee(Decimal("10")), None)


@pytest.mark.parametrize("policy", [
    TieredFee(()),
    TieredFee((CancellationTier(7, PercentageFee(Decimal("10"))),
               CancellationTier(7, PercentageFee(Decimal("20"))))),
    TieredFee((CancellationTier(0, TieredFee(())),)),
    PercentageFee(Decimal("150")),
    PercentageFee(Decimal("-1")),
    NightsFee(Decimal("-1")),
    FlatFee(gbp(-100)),
])
def test_invalid_policies(policy):
    with pytest.raises(ConfigurationError):
        validate_policy(policy)


def test_validate_policy_orders_tiers():
    shuffled = TieredFee(tuple(reversed(TWO_WEEK_POLICY.tiers)))
    assert [tier.min_days_before for tier in validate_policy(shuffled)] == [14, 7, 0]


def test_fee_for_dates():
    result = calculate_cancellation_fee_for_dates(usd(60000), TWO_WEEK_POLICY, "2030-06-11", "2030-06-01")
    assert result.days_before_checkin == 10
    assert result.fee == usd(30000)

    with pytest.raises(InvalidInputError):
        calculate_cancellation_fee_for_dates(usd(60000), TWO_WEEK_POLICY, None, "2030-06-01")


def test_policy_from_standard_rows():
    policy = policy_from_rules(standard_cancellation_rows("hotel_1"), Currency.GBP)
    assert policy == STANDARD_CANCELLATION_POLICY


def test_rule_from_row_aliases():
    assert rule_from_row({"fee_type": "fixed", "fee_value": "50"}, Currency.GBP) == FlatFee(gbp(5000))
    assert rule_from_row({"fee_type": "Percent", "fee_value": "25"}, Currency.GBP) == PercentageFee(Decimal("25"))
    with pytest.raises(ConfigurationError):
        rule_from_row({"fee_type": "bogus", "fee_value": "1"}, Currency.GBP)


def test_policy_from_rules_skips_inactive_rows():
    rows = [
        {"days_before_checkin_min": 7, "fee_type": "percentage", "fee_value": "0"},
        {"days_before_checkin_min": 0, "fee_type": "percentage", "fee_value": "100"},
        {"days_before_checkin_min": 3, "fee_type": "percentage", "fee_value": "50", "is_active": False},
    ]
    policy = policy_from_rules(rows, Currency.GBP)
    assert [tier.min_days_before for tier in policy.tiers] == [7, 0]


def test_policy_from_only_inactive_rows_is_misconfigured():
    rows = [{"days_before_checkin_min": 0, "fee_type": "fixed", "fee_value": "50", "is_active": False}]
    with pytest.raises(ConfigurationError):
        policy_from_rules(rows, Currency.GBP)


def test_fee_percentage_rounds_half_up():
    assert fee_percentage(gbp(1), gbp(20000)) == Decimal("0.01")
    assert fee_percentage(gbp(1), gbp(800)) == Decimal("0.13")
    assert fee_percentage(gbp(0), gbp(0)) == Decimal("0.00")
