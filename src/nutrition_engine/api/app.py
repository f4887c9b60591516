"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Request

from nutrition_engine.api.admin import router as admin_router
from nutrition_engine.api.models import (
    CompatibilityRequest,
    ResolveRequest,
    SearchRequest,
    TotalsRequest,
)
from nutrition_engine.app_logging import configure_logging
from nutrition_engine.config import parse_allergen_list
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.nutrition import (
    CompatibilityResult,
    NutritionValues,
    SearchCriteria,
    profile_to_record,
)
from nutrition_engine.services.totals import (
    calculate_total_nutrition,
    daily_percentages,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Nutrition engine starting with %s cached dishes",
            len(app.state.container.nutrition_service.cache.entries),
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/resolve")
    async def resolve(payload: ResolveRequest, request: Request) -> dict[str, object]:
        """Resolve a dish into a nutrition profile."""
        service = request.app.state.container.nutrition_service
        profile = await service.resolve(payload.dish_name, payload.ingredient_refs())
        return profile_to_record(profile)

    @app.post("/nutrition/compatibility")
    async def compatibility(
        payload: CompatibilityRequest, request: Request
    ) -> dict[str, object]:
        """Resolve a dish and check it against the given allergens."""
        service = request.app.state.container.nutrition_service
        profile = await service.resolve(payload.dish_name, payload.ingredient_refs())
        result = service.check_compatibility(
            profile, payload.allergens, payload.severities
        )
        return {
            "profile": profile_to_record(profile),
            **_format_compatibility(result),
        }

    @app.get("/dishes/{dish_name}/compatibility")
    async def dish_compatibility(
        dish_name: str, request: Request, allergens: str | None = None
    ) -> dict[str, object]:
        """Check a dish against a comma-separated allergen list."""
        service = request.app.state.container.nutrition_service
        profile = await service.resolve(dish_name)
        result = service.check_compatibility(profile, parse_allergen_list(allergens))
        return {"dish": profile.name, **_format_compatibility(result)}

    @app.post("/nutrition/totals")
    async def totals(payload: TotalsRequest, request: Request) -> dict[str, object]:
        """Total nutrition across dishes with daily percentages."""
        service = request.app.state.container.nutrition_service
        profiles = [await service.resolve(name) for name in payload.dish_names]
        total = calculate_total_nutrition(profiles)
        return {
            "totals": _format_values(total),
            "daily_percentages": daily_percentages(total, payload.target_calories),
        }

    @app.get("/dishes")
    async def list_dishes(request: Request) -> dict[str, list[str]]:
        """List curated dishes."""
        service = request.app.state.container.nutrition_service
        return {"dishes": service.list_known_dishes()}

    @app.post("/dishes/search")
    async def search_dishes(
        payload: SearchRequest, request: Request
    ) -> dict[str, list[str]]:
        """Search curated dishes by criteria."""
        service = request.app.state.container.nutrition_service
        criteria = SearchCriteria(
            spice_level=payload.spice_level,
            allergen_free=tuple(payload.allergen_free),
            max_calories=payload.max_calories,
            dietary_tags=tuple(payload.dietary_tags),
        )
        return {"dishes": service.search_dishes_by_criteria(criteria)}

    return app


def _format_compatibility(result: CompatibilityResult) -> dict[str, object]:
    return {
        "is_safe": result.is_safe,
        "conflicting_allergens": list(result.conflicting_allergens),
        "warnings": list(result.warnings),
        "safety_level": result.safety_level,
    }


def _format_values(values: NutritionValues) -> dict[str, float | None]:
    return asdict(values)
