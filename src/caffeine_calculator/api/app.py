"""FastAPI application factory."""

import logging
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from caffeine_calculator.api.models import CalculationRequest
from caffeine_calculator.app_logging import configure_logging
from caffeine_calculator.containers import AppContainer
from caffeine_calculator.domain.caffeine import CaffeineResult
from caffeine_calculator.domain.history import HistoryEntry
from caffeine_calculator.services.calculator import (
    SOURCE_CATALOG,
    SourceNotFoundError,
    calculate_caffeine,
    classify_safety,
    format_report,
    safety_gauge,
    select_source,
)
from caffeine_calculator.services.history import format_timestamp
from caffeine_calculator.services.stats import (
    average_by_tolerance,
    timeline,
    tolerance_distribution,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Caffeine Survival Calculator")
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/sources")
    async def list_sources() -> dict[str, object]:
        """Return the beverage catalog."""
        return {
            "sources": [
                {
                    "name": source.name,
                    "serving_size": source.serving_size,
                    "serving_size_metric": source.serving_size_metric,
                    "caffeine_per_serving": source.caffeine_per_serving,
                }
                for source in SOURCE_CATALOG
            ]
        }

    @app.post("/calculate")
    async def calculate(
        payload: CalculationRequest, request: Request
    ) -> dict[str, object]:
        """Compute a recommendation and record it in the history."""
        state_container: AppContainer = request.app.state.container
        inputs = payload.to_input()
        result = calculate_caffeine(inputs)
        entry = state_container.history_service.append(inputs, result)
        logger.info(
            "Calculated dose: entry_id=%s total_mg=%s", entry.id, result.total_mg
        )
        return {"entry_id": entry.id, **_result_payload(result)}

    @app.post("/calculate/report", response_class=PlainTextResponse)
    async def calculation_report(
        payload: CalculationRequest, source: str = "Coffee", metric: bool = True
    ) -> PlainTextResponse:
        """Render the text export of a calculation without recording it."""
        result = calculate_caffeine(payload.to_input())
        try:
            selected = select_source(result, source)
        except SourceNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown caffeine source: {source}",
            ) from exc
        return PlainTextResponse(
            format_report(result, selected, metric=metric),
            headers={
                "Content-Disposition": 'attachment; filename="caffeine-calculation.txt"'
            },
        )

    @app.get("/history")
    async def list_history(request: Request) -> dict[str, object]:
        """Return recorded calculations, newest first."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.history_service.get_all()
        return {"entries": [_entry_payload(entry) for entry in entries]}

    @app.get("/history/stats")
    async def history_stats(request: Request) -> dict[str, object]:
        """Return aggregates over the recorded calculations."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.history_service.get_all()
        return {
            "count": len(entries),
            "by_tolerance": [
                {"tolerance": item.tolerance.value, "count": item.count}
                for item in tolerance_distribution(entries)
            ],
            "average_by_tolerance": [
                {"tolerance": item.tolerance.value, "avg_mg": item.avg_mg}
                for item in average_by_tolerance(entries)
            ],
            "timeline": [
                {
                    "timestamp": format_timestamp(point.timestamp),
                    "total_mg": point.total_mg,
                }
                for point in timeline(entries)
            ],
        }

    @app.delete("/history/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_history_entry(entry_id: int, request: Request) -> Response:
        """Delete one recorded calculation."""
        state_container: AppContainer = request.app.state.container
        state_container.history_service.delete_one(entry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
    async def clear_history(request: Request) -> Response:
        """Delete every recorded calculation."""
        state_container: AppContainer = request.app.state.container
        state_container.history_service.clear_all()
        logger.info("History cleared")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def _result_payload(result: CaffeineResult) -> dict[str, object]:
    gauge = safety_gauge(result.total_mg)
    return {
        "total_mg": result.total_mg,
        "breakdown": result.breakdown,
        "components": {
            "base_mg": result.base_mg,
            "weight_mg": result.weight_mg,
            "sleep_boost_mg": result.sleep_boost_mg,
        },
        "sources": [
            {**asdict(source), "total_mg": source.total_mg}
            for source in result.sources
        ],
        "safety_warning": result.safety_warning,
        "safety_level": classify_safety(result.total_mg).value,
        "safety_gauge": {"percentage": gauge.percentage, "label": gauge.label},
    }


def _entry_payload(entry: HistoryEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "timestamp": format_timestamp(entry.timestamp),
        "inputs": {
            "weight": entry.inputs.weight,
            "weight_unit": entry.inputs.weight_unit.value,
            "hours_awake": entry.inputs.hours_awake,
            "hours_to_survive": entry.inputs.hours_to_survive,
            "tolerance": entry.inputs.tolerance.value,
        },
        "result": {
            "total_mg": entry.result.total_mg,
            "breakdown": entry.result.breakdown,
            "safety_warning": entry.result.safety_warning,
        },
        "safety_level": classify_safety(entry.result.total_mg).value,
    }
