import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .cancellation import calculate_cancellation_fee, policy_from_rules, tier_to_row, validate_policy
from .charges import calculate_services_cost
from .compose import either_pipe, pipe
from .config import Settings
from .dates import DateLike, days_before_checkin, validate_booking_dates
from .domain import (
    BookingService, CancellationFeeCalculation, Hotel, ItemizedBookingCost, RoomTypeDefinition,
    ServiceDefinition, StayContext, TieredFee,
)
from .errors import ConfigurationError, InvalidInputError, PricingError, UnknownReferenceError
from .ftypes import Either, Maybe
from .itemize import itemize_booking_cost
from .money import Money
from .report import policy_examples, policy_lines
from .room import calculate_room_price_for_stay
from .transforms import PricingCatalog

logger = logging.getLogger(__name__)

# (service id, uses) pairs; uses only matters for per-use services.
ServiceRequest = Tuple[str, Optional[int]]


@dataclass(frozen=True)
class EstimateRequest:
    hotel_id: str
    room_type_id: str
    check_in: DateLike
    check_out: DateLike
    guests: int = 1
    services: Tuple[ServiceRequest, ...] = ()
    is_peak: Optional[bool] = None


@dataclass(frozen=True)
class PricingEstimate:
    request: EstimateRequest
    room_type: RoomTypeDefinition
    itemized: ItemizedBookingCost


@dataclass(frozen=True)
class PricingService:
    """Pricing use cases over an immutable catalog."""

    settings: Settings
    catalog: PricingCatalog

    # Lookups

    def find_hotel(self, hotel_id: str) -> Maybe[Hotel]:
        return Maybe.first(self.catalog.hotels, lambda hotel: hotel.id == hotel_id)

    def find_room_type(self, hotel_id: str, room_type_id: str) -> Maybe[RoomTypeDefinition]:
        return Maybe.first(
            self.catalog.room_types,
            lambda room: room.id == room_type_id and room.hotel_id == hotel_id,
        )

    def find_service(self, service_id: str) -> Maybe[ServiceDefinition]:
        return Maybe.first(
            self.catalog.active_services, lambda service: service.id == service_id
        )

    def cancellation_policy_for(self, hotel_id: str) -> TieredFee:
        rows = self.catalog.cancellation_rules.get(hotel_id)
        if rows is None:
            raise UnknownReferenceError(f"No cancellation rules found for hotel {hotel_id}",
                                        {"hotel_id": hotel_id})
        return policy_from_rules(rows, self.catalog.currency)

    # Estimates

    def _booking_services(self, requests: Sequence[ServiceRequest]) -> Tuple[BookingService, ...]:
        services = []
        for service_id, uses in requests:
            definition = self.find_service(service_id).or_raise(
                UnknownReferenceError(f"Service not found: {service_id}", {"service_id": service_id})
            )
            services.append(BookingService.from_definition(definition, uses))
        return tuple(services)

    def estimate(self, request: EstimateRequest) -> PricingEstimate:
        """Itemized cost of a stay, including requested services and tax."""
        logger.debug("Estimating %s/%s %s..%s for %s guests",
                     request.hotel_id, request.room_type_id,
                     request.check_in, request.check_out, request.guests)

        dates = validate_booking_dates(
            request.check_in, request.check_out, max_nights=self.settings.max_stay_nights
        )
        if dates.is_left():
            raise InvalidInputError(dates.fold(lambda e: e, lambda _: ""),
                                    {"check_in": str(request.check_in),
                                     "check_out": str(request.check_out)})

        room_type = self.find_room_type(request.hotel_id, request.room_type_id).or_raise(
            UnknownReferenceError(
                f"Room type not found: {request.room_type_id}",
                {"hotel_id": request.hotel_id, "room_type_id": request.room_type_id},
            )
        )
        booking_services = self._booking_services(request.services)

        room = calculate_room_price_for_stay(
            room_type,
            request.check_in,
            request.check_out,
            guests=request.guests,
            peak_seasons=self.catalog.peak_seasons,
            occupancy=self.settings.occupancy_policy,
            is_peak=request.is_peak,
        )

        def add_services(room_price):
            charges, _ = calculate_services_cost(
                booking_services, StayContext(room_price.nights, room_price.guests),
                room_price.currency,
            )
            return room_price, charges

        def itemize(priced):
            room_price, charges = priced
            return itemize_booking_cost(room_price, charges, tax_rate=self.settings.tax_rate)

        itemized = pipe(room, add_services, itemize)
        logger.debug("Estimate for %s: %s", request.room_type_id, itemized.grand_total)
        return PricingEstimate(request=request, room_type=room_type, itemized=itemized)

    def safe_estimate(self, request: EstimateRequest) -> Either[PricingError, PricingEstimate]:
        return either_pipe(request, self.estimate)

    def quote_batch(self, requests: Sequence[EstimateRequest]) -> List[Either[PricingError, PricingEstimate]]:
        """Estimate each request independently; failures do not stop the batch."""
        results = [self.safe_estimate(request) for request in requests]
        failed = sum(1 for result in results if result.is_left())
        if failed:
            logger.info("Batch estimate: %d of %d requests failed", failed, len(results))
        return results

    # Cancellation

    def cancellation_fee(
        self,
        hotel_id: str,
        check_in: Optional[DateLike],
        cancelled_at: DateLike,
        total_booking_price: Money,
        first_night_price: Optional[Money] = None,
    ) -> CancellationFeeCalculation:
        for field, price in (("total_booking_price", total_booking_price),
                             ("first_night_price", first_night_price)):
            if price is not None and price.is_negative():
                raise InvalidInputError("Prices cannot be negative", {"field": field})
        policy = self.cancellation_policy_for(hotel_id)
        days = days_before_checkin(check_in, cancelled_at)
        result = calculate_cancellation_fee(total_booking_price, policy, days, first_night_price)
        logger.debug("Cancellation for %s at %d days: fee %s, refund %s",
                     hotel_id, days, result.fee, result.refundable)
        return result

    def cancellation_policy(
        self,
        hotel_id: str,
        booking_total: Optional[Money] = None,
        first_night_price: Optional[Money] = None,
    ) -> Dict[str, Any]:
        """Policy tiers as rows, plus example fees when a booking total is given."""
        policy = self.cancellation_policy_for(hotel_id)
        tiers = validate_policy(policy)
        rows = []
        upper = None
        for tier in tiers:
            rows.append(tier_to_row(tier, upper))
            upper = tier.min_days_before - 1

        examples: List[Dict[str, Any]] = []
        if booking_total is not None:
            examples = policy_examples(policy, booking_total, first_night_price)
        return {
            'hotel_id': hotel_id,
            'hotel_name': self.find_hotel(hotel_id).map(lambda hotel: hotel.name).get_or_else(None),
            'rules': rows,
            'summary': policy_lines(policy),
            'examples': examples,
        }


def create_pricing_service(settings: Settings, catalog: PricingCatalog) -> PricingService:
    """Build a service, checking the catalog against the settings."""
    if catalog.currency != settings.currency:
        raise ConfigurationError(
            f"Catalog currency {catalog.currency.value} differs from configured "
            f"{settings.currency.value}"
        )
    for room in catalog.room_types:
        if room.currency != catalog.currency:
            raise ConfigurationError(f"Room type {room.id} is priced in {room.currency.value}")
    logger.info("Pricing service ready: %d room types, %d services, %d hotels with policies",
                len(catalog.room_types), len(catalog.active_services), len(catalog.cancellation_rules))
    return PricingService(settings=settings, catalog=catalog)
