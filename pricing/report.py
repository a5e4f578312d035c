from typing import Any, Dict, List, Optional, Sequence

from .cancellation import calculate_cancellation_fee, describe_rule, validate_policy
from .domain import CancellationPolicy, ItemizedBookingCost, RoomTypeDefinition
from .money import Money

EXAMPLE_NOTICE_DAYS = (30, 14, 7, 3, 1, 0)


def booking_summary(cost: ItemizedBookingCost) -> List[str]:
    """Plain-text booking summary."""
    lines = ['=== BOOKING SUMMARY ===', '', 'ROOM CHARGES']
    lines.append(f"  {cost.room_line.label}  {cost.room_line.amount.format()}")

    if cost.service_lines:
        lines.extend(['', 'SERVICES'])
        for line in cost.service_lines:
            lines.append(f"  {line.label}  {line.amount.format()}")

    lines.extend(['', 'PRICING SUMMARY'])
    lines.append(f"  Subtotal:  {cost.subtotal.format()}")
    for line in cost.fee_lines:
        lines.append(f"  {line.label}:  {line.amount.format()}")
    lines.append(f"  TOTAL:  {cost.grand_total.format()}")
    return lines


def price_range(room_type: RoomTypeDefinition, min_nights: int = 1,
                max_nights: Optional[int] = None) -> Dict[str, Any]:
    """Cheapest and dearest room cost over a span of nights."""
    max_nights = min_nights if max_nights is None else max_nights
    low = room_type.price_off_peak.times(min_nights)
    high = (room_type.price_peak or room_type.price_off_peak).times(max_nights)
    return {
        'min': low,
        'max': high,
        'range': f"{low.format()} - {high.format()}",
    }


def policy_examples(
    policy: CancellationPolicy,
    total: Money,
    first_night: Optional[Money] = None,
    notice_days: Sequence[int] = EXAMPLE_NOTICE_DAYS,
) -> List[Dict[str, Any]]:
    """Fee at representative notice periods, for showing a policy to guests."""
    examples = []
    for days in notice_days:
        result = calculate_cancellation_fee(total, policy, days, first_night)
        examples.append({
            'days_before': days,
            'fee': result.fee,
            'fee_percentage': result.fee_percentage,
            'description': result.description,
        })
    return examples


def policy_lines(policy: CancellationPolicy) -> List[str]:
    tiers = validate_policy(policy)
    if not tiers:
        return [describe_rule(policy)]

    lines = []
    upper = None
    for tier in tiers:
        if upper is None:
            span = f"{tier.min_days_before}+ days"
        elif upper == tier.min_days_before:
            span = f"{tier.min_days_before} days"
        else:
            span = f"{tier.min_days_before}-{upper} days"
        lines.append(f"{span} before check-in: {describe_rule(tier.rule)}")
        upper = tier.min_days_before - 1
    return lines
