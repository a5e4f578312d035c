from typing import Iterable, Optional

from .dates import DateLike, as_date, calculate_nights, find_peak_season
from .domain import OccupancyPolicy, PeakSeason, RoomPriceCalculation, RoomTypeDefinition
from .errors import CurrencyMismatchError, InvalidInputError
from .money import Money


def calculate_room_price(
    nightly_rate: Money,
    nights: int,
    guests: int = 1,
    occupancy: Optional[OccupancyPolicy] = None,
    is_peak: bool = False,
    base_rate: Optional[Money] = None,
) -> RoomPriceCalculation:
    """Room cost for a stay at a fixed nightly rate.

    Total = (rate + surcharge * extra guests) * nights, where extra guests
    are those above the occupancy policy's base occupancy. `base_rate` is the
    off-peak price reported alongside a peak `nightly_rate`.
    """
    if isinstance(nights, bool) or not isinstance(nights, int) or nights <= 0:
        raise InvalidInputError("Number of nights must be a positive integer", {"nights": nights})
    if isinstance(guests, bool) or not isinstance(guests, int) or guests <= 0:
        raise InvalidInputError("Number of guests must be positive", {"guests": guests})
    if nightly_rate.is_negative():
        raise InvalidInputError("Nightly rate cannot be negative", {"rate": nightly_rate.amount})

    currency = nightly_rate.currency
    extra_guests = 0
    surcharge = Money.zero(currency)
    if occupancy is not None:
        if occupancy.base_occupancy < 0:
            raise InvalidInputError("Base occupancy cannot be negative")
        if occupancy.extra_guest_surcharge.is_negative():
            raise InvalidInputError("Extra guest surcharge cannot be negative")
        if occupancy.extra_guest_surcharge.currency != currency:
            raise CurrencyMismatchError(
                "Extra guest surcharge must be in the nightly rate currency",
                {"expected": currency.value, "got": occupancy.extra_guest_surcharge.currency.value},
            )
        extra_guests = max(0, guests - occupancy.base_occupancy)
        if extra_guests:
            surcharge = occupancy.extra_guest_surcharge

    room_subtotal = nightly_rate.times(nights)
    surcharge_total = surcharge.times(extra_guests).times(nights)

    return RoomPriceCalculation(
        base_rate=base_rate if base_rate is not None else nightly_rate,
        applied_rate=nightly_rate,
        is_peak=is_peak,
        nights=nights,
        guests=guests,
        extra_guests=extra_guests,
        surcharge_per_night=surcharge.times(extra_guests),
        room_subtotal=room_subtotal,
        surcharge_total=surcharge_total,
        total=room_subtotal + surcharge_total,
    )


def peak_rate(room_type: RoomTypeDefinition, season: Optional[PeakSeason]) -> Money:
    """Peak nightly price, falling back to off-peak x season multiplier."""
    if room_type.price_peak is not None:
        return room_type.price_peak
    if season is None:
        return room_type.price_off_peak
    return room_type.price_off_peak.scale(season.multiplier)


def calculate_room_price_for_stay(
    room_type: RoomTypeDefinition,
    checkin: DateLike,
    checkout: DateLike,
    guests: int = 1,
    peak_seasons: Iterable[PeakSeason] = (),
    occupancy: Optional[OccupancyPolicy] = None,
    is_peak: Optional[bool] = None,
) -> RoomPriceCalculation:
    """Room cost from stay dates; the check-in date decides peak pricing."""
    nights = calculate_nights(checkin, checkout)
    if isinstance(guests, int) and guests > room_type.capacity:
        raise InvalidInputError(
            f"Room capacity exceeded. Maximum: {room_type.capacity} guests",
            {"guests": guests, "capacity": room_type.capacity},
        )

    season = find_peak_season(peak_seasons, room_type.hotel_id, as_date(checkin)).get_or_else(None)
    peak = season is not None if is_peak is None else is_peak
    rate = peak_rate(room_type, season) if peak else room_type.price_off_peak

    return calculate_room_price(
        rate,
        nights,
        guests=guests,
        occupancy=occupancy,
        is_peak=peak,
        base_rate=room_type.price_off_peak,
    )
