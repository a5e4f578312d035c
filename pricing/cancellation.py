"""Cancellation fee calculation.

A policy is one of the fee rules in `pricing.domain`: a flat amount, a
percentage of the booking total, a multiple of the first-night price, or a
table of tiers keyed by the minimum notice (days before check-in) each tier
requires. Tiers are tried from most notice to least; a notice period below
every bound (a no-show after check-in) falls into the least-notice tier.

All fees are capped at the booking total, so the refundable amount is never
negative.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .dates import DateLike, days_before_checkin
from .domain import (
    CancellationFeeCalculation, CancellationFeeType, CancellationPolicy, CancellationTier,
    FeeRule, FlatFee, NightsFee, PercentageFee, TieredFee,
)
from .errors import ConfigurationError, CurrencyMismatchError, InvalidInputError
from .money import Currency, Money, to_decimal

HUNDRED = Decimal(100)


def validate_policy(policy: CancellationPolicy) -> Tuple[CancellationTier, ...]:
    """Check a policy and return its tiers ordered from most to least notice.

    Non-tiered policies return an empty tuple.
    """
    if isinstance(policy, TieredFee):
        if not policy.tiers:
            raise ConfigurationError("Tiered cancellation policy has no tiers")
        bounds = [tier.min_days_before for tier in policy.tiers]
        if len(set(bounds)) != len(bounds):
            raise ConfigurationError("Tiered cancellation policy has duplicate notice bounds",
                                     {"bounds": bounds})
        for tier in policy.tiers:
            if isinstance(tier.rule, TieredFee):
                raise ConfigurationError("Cancellation tiers cannot be nested")
            _validate_rule(tier.rule)
        return tuple(sorted(policy.tiers, key=lambda tier: tier.min_days_before, reverse=True))
    _validate_rule(policy)
    return ()


def _validate_rule(rule: Any) -> None:
    if isinstance(rule, PercentageFee):
        if not (Decimal(0) <= to_decimal(rule.percent, "percent") <= HUNDRED):
            raise ConfigurationError("Cancellation percentage must be between 0 and 100",
                                     {"percent": str(rule.percent)})
    elif isinstance(rule, FlatFee):
        if rule.amount.is_negative():
            raise ConfigurationError("Flat cancellation fee cannot be negative")
    elif isinstance(rule, NightsFee):
        if to_decimal(rule.nights, "nights") < 0:
            raise ConfigurationError("Cancellation nights cannot be negative")
    else:
        raise ConfigurationError(f"Unsupported cancellation rule: {rule!r}")


def select_tier(tiers: Tuple[CancellationTier, ...], days: int) -> CancellationTier:
    """Pick the tier for `days` of notice from tiers ordered most-notice first."""
    for tier in tiers:
        if tier.min_days_before <= days:
            return tier
    return tiers[-1]


def _rule_fee(rule: FeeRule, total: Money, first_night: Optional[Money]) -> Money:
    if isinstance(rule, FlatFee):
        if rule.amount.currency != total.currency:
            raise CurrencyMismatchError(
                "Flat cancellation fee currency differs from the booking total",
                {"expected": total.currency.value, "got": rule.amount.currency.value},
            )
        return rule.amount
    if isinstance(rule, PercentageFee):
        return total.percent(rule.percent)
    if isinstance(rule, NightsFee):
        if first_night is None:
            raise InvalidInputError("first_night_price is required for a nights-based fee",
                                    {"field": "first_night_price"})
        if first_night.is_negative():
            raise InvalidInputError("first_night_price cannot be negative",
                                    {"field": "first_night_price"})
        if first_night.currency != total.currency:
            raise CurrencyMismatchError(
                "First-night price currency differs from the booking total",
                {"expected": total.currency.value, "got": first_night.currency.value},
            )
        return first_night.scale(rule.nights)
    raise ConfigurationError(f"Unsupported cancellation rule: {rule!r}")


def describe_rule(rule: FeeRule) -> str:
    if isinstance(rule, PercentageFee):
        return f"{to_decimal(rule.percent).normalize():f}% charge"
    if isinstance(rule, NightsFee):
        nights = to_decimal(rule.nights).normalize()
        return f"{nights:f} night{'' if nights == 1 else 's'} charge"
    if isinstance(rule, FlatFee):
        return f"{rule.amount.format()} charge"
    raise ConfigurationError(f"Unsupported cancellation rule: {rule!r}")


def fee_percentage(fee: Money, total: Money) -> Decimal:
    if total.is_zero():
        return Decimal("0.00")
    percent = Decimal(fee.amount) * HUNDRED / Decimal(total.amount)
    return percent.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_cancellation_fee(
    total: Money,
    policy: CancellationPolicy,
    days_before: Optional[int],
    first_night: Optional[Money] = None,
) -> CancellationFeeCalculation:
    """Fee and refundable amount for cancelling `days_before` days ahead."""
    if total.is_negative():
        raise InvalidInputError("Total booking price cannot be negative",
                                {"total": total.amount})
    if days_before is None:
        raise InvalidInputError("Days before check-in is required (missing check-in date)",
                                {"field": "check_in"})

    tiers = validate_policy(policy)
    tier = select_tier(tiers, days_before) if tiers else None
    rule = tier.rule if tier is not None else policy

    fee = _rule_fee(rule, total, first_night).min(total)
    refundable = (total - fee).max(Money.zero(total.currency))

    if tier is not None and tier.description:
        description = tier.description
    else:
        description = f"{days_before} days before check-in: {describe_rule(rule)}"

    return CancellationFeeCalculation(
        fee_type=policy.fee_type,
        fee=fee,
        refundable=refundable,
        days_before_checkin=days_before,
        fee_percentage=fee_percentage(fee, total),
        description=description,
        tier=tier,
    )


def calculate_cancellation_fee_for_dates(
    total: Money,
    policy: CancellationPolicy,
    checkin: Optional[DateLike],
    cancelled_at: DateLike,
    first_night: Optional[Money] = None,
) -> CancellationFeeCalculation:
    return calculate_cancellation_fee(
        total, policy, days_before_checkin(checkin, cancelled_at), first_night
    )


# Database-shaped rules

FEE_TYPE_ALIASES = {
    "percentage": CancellationFeeType.PERCENTAGE,
    "percent": CancellationFeeType.PERCENTAGE,
    "fixed": CancellationFeeType.FLAT,
    "flat": CancellationFeeType.FLAT,
    "nights": CancellationFeeType.NIGHTS,
}


def rule_from_row(row: Mapping[str, Any], currency: Currency) -> FeeRule:
    """Convert one `cancellation_fees` row into a fee rule."""
    fee_type = FEE_TYPE_ALIASES.get(str(row.get("fee_type", "")).lower())
    if fee_type is None:
        raise ConfigurationError(f"Unknown cancellation fee type: {row.get('fee_type')!r}",
                                 {"rule_id": row.get("id")})
    try:
        value = to_decimal(row.get("fee_value", 0), "fee_value")
    except InvalidInputError as e:
        raise ConfigurationError(e.message, {"rule_id": row.get("id")})

    if fee_type is CancellationFeeType.PERCENTAGE:
        return PercentageFee(value)
    if fee_type is CancellationFeeType.NIGHTS:
        return NightsFee(value)
    return FlatFee(Money.of(value, currency))


def policy_from_rules(rows: Iterable[Mapping[str, Any]], currency: Currency) -> TieredFee:
    """Build a tiered policy from active rule rows keyed on their minimum notice."""
    tiers = []
    for row in rows:
        if not row.get("is_active", True):
            continue
        try:
            min_days = int(row["days_before_checkin_min"])
        except (KeyError, TypeError, ValueError):
            raise ConfigurationError("Cancellation rule is missing days_before_checkin_min",
                                     {"rule_id": row.get("id")})
        tiers.append(CancellationTier(
            min_days_before=min_days,
            rule=rule_from_row(row, currency),
            description=str(row.get("description") or ""),
        ))
    policy = TieredFee(tuple(sorted(tiers, key=lambda t: t.min_days_before, reverse=True)))
    validate_policy(policy)
    return policy


def tier_to_row(tier: CancellationTier, max_days: Optional[int]) -> Dict[str, Any]:
    rule = tier.rule
    if isinstance(rule, PercentageFee):
        fee_value: Any = str(rule.percent)
    elif isinstance(rule, NightsFee):
        fee_value = str(rule.nights)
    else:
        fee_value = str(rule.amount.to_decimal())
    return {
        "days_before_checkin_min": tier.min_days_before,
        "days_before_checkin_max": max_days,
        "fee_type": rule.fee_type.value,
        "fee_value": fee_value,
        "description": tier.description,
    }
