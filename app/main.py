import logging
import os
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI

from pricing.catalog import standard_catalog
from pricing.config import Settings, load_settings
from pricing.errors import ConfigurationError
from pricing.ftypes import Either, partition
from pricing.logger import setup_logging
from pricing.money import Money
from pricing.report import booking_summary
from pricing.service import EstimateRequest, PricingService, create_pricing_service
from pricing.transforms import PricingCatalog, load_seed, parse_seed_data

from .errors import register_exception_handlers
from .schemas import (
    CancellationFeeRequest, EstimateItem, cancellation_to_dict, estimate_to_dict, money_to_dict,
    parse_service_specs, room_type_to_dict, service_definition_to_dict,
)

logger = logging.getLogger(__name__)


class State:
    """Settings and pricing service shared by all requests."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self.catalog = self.load_catalog()
        self.source = "seed" if self.catalog is not None else "standard"
        if self.catalog is None:
            self.catalog = standard_catalog(self.settings.currency)
        self.pricing: PricingService = create_pricing_service(self.settings, self.catalog)

    def load_catalog(self) -> Optional[PricingCatalog]:
        """Load the seed catalog; None means fall back to the standard catalog."""
        seed_path = self.settings.seed_path
        if not os.path.exists(seed_path):
            logger.warning("Seed file %s not found, using the standard catalog", seed_path)
            return None
        try:
            return parse_seed_data(load_seed(seed_path), self.settings.currency)
        except (OSError, ValueError, ConfigurationError) as e:
            logger.error("Error loading seed data from %s: %s", seed_path, e)
            return None


settings = load_settings()
setup_logging(settings.log_level)
state = State(settings)

app = FastAPI(title="Hotel Pricing", version="1.0.0")
register_exception_handlers(app)


def get_pricing() -> PricingService:
    return state.pricing


def estimate_request(item: EstimateItem) -> EstimateRequest:
    return EstimateRequest(
        hotel_id=item.hotel_id,
        room_type_id=item.room_type_id,
        check_in=item.check_in,
        check_out=item.check_out,
        guests=item.guests,
        services=parse_service_specs(item.services),
        is_peak=item.is_peak,
    )


def _optional_money(value: Optional[Decimal], currency) -> Optional[Money]:
    return Money.of(value, currency) if value is not None else None


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "catalog_source": state.source,
        "currency": state.catalog.currency.value,
        "room_types_count": len(state.catalog.room_types),
        "services_count": len(state.catalog.active_services),
    }


@app.get("/api/services")
async def get_services(pricing: PricingService = Depends(get_pricing)):
    return {
        "success": True,
        "data": [service_definition_to_dict(s) for s in pricing.catalog.active_services],
    }


@app.get("/api/rooms/{hotel_id}")
async def get_rooms_by_hotel(hotel_id: str, pricing: PricingService = Depends(get_pricing)):
    rooms = [room for room in pricing.catalog.room_types if room.hotel_id == hotel_id]
    return {"success": True, "data": [room_type_to_dict(room) for room in rooms]}


@app.get("/api/pricing/estimate")
async def get_estimate(
    hotel_id: str,
    room_type_id: str,
    check_in: str,
    check_out: str,
    guests: int = 1,
    services: str = "",
    is_peak: Optional[bool] = None,
    pricing: PricingService = Depends(get_pricing),
):
    """Itemized estimate; `services` is a comma-separated list of id[:uses]."""
    item = EstimateItem(
        hotel_id=hotel_id,
        room_type_id=room_type_id,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        services=services.split(',') if services else [],
        is_peak=is_peak,
    )
    estimate = pricing.estimate(estimate_request(item))
    data = estimate_to_dict(estimate)
    data["summary"] = booking_summary(estimate.itemized)
    return {"success": True, "data": data}


@app.post("/api/pricing/estimates")
async def post_estimates(items: List[EstimateItem], pricing: PricingService = Depends(get_pricing)):
    """Batch estimates; each item succeeds or fails on its own."""
    requests = [Either.try_except(lambda item=item: estimate_request(item)) for item in items]
    _, parsed = partition(requests)
    estimates = iter(pricing.quote_batch(parsed))

    results: List[Dict[str, Any]] = []
    for request in requests:
        result = request.bind(lambda _: next(estimates))
        results.append(result.fold(
            lambda error: {"success": False, "error": error.to_dict()},
            lambda estimate: {"success": True, "data": estimate_to_dict(estimate)},
        ))
    return {"results": results}


@app.post("/api/pricing/cancellation-fee")
async def post_cancellation_fee(body: CancellationFeeRequest,
                                pricing: PricingService = Depends(get_pricing)):
    currency = body.currency or pricing.catalog.currency
    result = pricing.cancellation_fee(
        hotel_id=body.hotel_id,
        check_in=body.check_in,
        cancelled_at=body.cancellation_date,
        total_booking_price=Money.of(body.total_booking_price, currency),
        first_night_price=_optional_money(body.first_night_price, currency),
    )
    return {"success": True, "data": cancellation_to_dict(result)}


@app.get("/api/pricing/cancellation-policy/{hotel_id}")
async def get_cancellation_policy(
    hotel_id: str,
    booking_total: Optional[Decimal] = None,
    first_night_price: Optional[Decimal] = None,
    pricing: PricingService = Depends(get_pricing),
):
    currency = pricing.catalog.currency
    info = pricing.cancellation_policy(
        hotel_id,
        booking_total=_optional_money(booking_total, currency),
        first_night_price=_optional_money(first_night_price, currency),
    )
    info["examples"] = [
        {**example, "fee": money_to_dict(example["fee"]),
         "fee_percentage": str(example["fee_percentage"])}
        for example in info["examples"]
    ]
    return {"success": True, "data": info}


if __name__ == "__main__":
    import uvicorn
    # Run from the project root: uvicorn app.main:app --reload
    uvicorn.run("app.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
