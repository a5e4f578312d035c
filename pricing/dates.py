import math
from datetime import date, datetime
from typing import Iterable, Optional, Tuple, Union

from .domain import PeakSeason
from .errors import InvalidInputError
from .ftypes import Either, Maybe

DateLike = Union[date, datetime, str]

SECONDS_PER_DAY = 24 * 60 * 60


def parse_date(value: DateLike, field: str = "date") -> Union[date, datetime]:
    """Parse an ISO date or datetime string; date objects pass through."""
    if isinstance(value, (date, datetime)):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"{field} is required", {"field": field})
    try:
        if "T" in value or " " in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(
            f"Invalid {field}: {value!r}. Use YYYY-MM-DD",
            {"field": field, "value": value},
        )


def as_date(value: DateLike, field: str = "date") -> date:
    parsed = parse_date(value, field)
    return parsed.date() if isinstance(parsed, datetime) else parsed


def calculate_nights(checkin: DateLike, checkout: DateLike) -> int:
    """Number of nights between check-in and check-out dates."""
    nights = (as_date(checkout, "check_out") - as_date(checkin, "check_in")).days
    if nights <= 0:
        raise InvalidInputError(
            "Check-out date must be after check-in date",
            {"check_in": str(checkin), "check_out": str(checkout)},
        )
    return nights


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def days_before_checkin(checkin: Optional[DateLike], cancelled_at: DateLike) -> int:
    """Signed notice period in days; part days round up, past check-in is negative."""
    if checkin is None:
        raise InvalidInputError("check_in date is required to compute the notice period",
                                {"field": "check_in"})
    start = parse_date(cancelled_at, "cancellation_date")
    end = parse_date(checkin, "check_in")
    if not isinstance(start, datetime) and not isinstance(end, datetime):
        return (end - start).days

    start_dt, end_dt = _as_datetime(start), _as_datetime(end)
    if (start_dt.tzinfo is None) != (end_dt.tzinfo is None):
        # Naive values are read as being in the aware value's zone.
        tz = start_dt.tzinfo or end_dt.tzinfo
        start_dt, end_dt = start_dt.replace(tzinfo=tz), end_dt.replace(tzinfo=tz)
    return math.ceil((end_dt - start_dt).total_seconds() / SECONDS_PER_DAY)


def is_date_in_range(day: DateLike, start: DateLike, end: DateLike) -> bool:
    """Inclusive range check on calendar dates."""
    return as_date(start) <= as_date(day) <= as_date(end)


def find_peak_season(seasons: Iterable[PeakSeason], hotel_id: str, day: DateLike) -> Maybe[PeakSeason]:
    """Active peak season of `hotel_id` that contains `day`."""
    target = as_date(day)
    return Maybe.first(
        seasons,
        lambda season: (
            season.is_active
            and season.hotel_id == hotel_id
            and is_date_in_range(target, season.start_date, season.end_date)
        ),
    )


def validate_booking_dates(
    checkin: DateLike,
    checkout: DateLike,
    today: Optional[date] = None,
    max_nights: Optional[int] = None,
) -> Either[str, Tuple[date, date]]:
    """Validate a requested stay; `today` enables the past check-in check."""
    try:
        checkin_date = as_date(checkin, "check_in")
        checkout_date = as_date(checkout, "check_out")
    except InvalidInputError as e:
        return Either.left(e.message)

    if checkout_date <= checkin_date:
        return Either.left("Check-out date must be after check-in date")

    if today is not None and checkin_date < today:
        return Either.left("Check-in date cannot be in the past")

    if max_nights is not None and (checkout_date - checkin_date).days > max_nights:
        return Either.left(f"Maximum stay is {max_nights} nights")

    return Either.right((checkin_date, checkout_date))
