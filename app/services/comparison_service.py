"""
app/services/comparison_service.py

Bridges ingested rows to the comparison engine and shapes the API payload.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Sequence

from app.logging_utils import log_event
from app.schemas.comparison import ComparisonResponse
from comparison.models import InputRow
from comparison.orchestrator import ComparisonOrchestrator

logger = logging.getLogger(__name__)


class ComparisonService:
    """
    Runs the engine over a complete row set and builds the response model.
    """

    def __init__(self, orchestrator: ComparisonOrchestrator | None = None) -> None:
        self._orchestrator = orchestrator or ComparisonOrchestrator()

    def compare(
        self,
        rows: Sequence[InputRow],
        *,
        meta: dict[str, Any] | None = None,
    ) -> ComparisonResponse:
        result = self._orchestrator.build(rows)

        log_event(
            logger,
            logging.INFO,
            "comparison_built",
            rows=len(rows),
            countries=len(result.comparison),
            leader=result.comparison[0].country if result.comparison else None,
            weights=result.weights.to_dict(),
        )

        return ComparisonResponse.model_validate(
            {
                "raw": [row.to_dict() for row in rows],
                "comparison": [country.to_dict() for country in result.comparison],
                "weights": result.weights.to_dict(),
                "charts": result.charts,
                "insights": result.insights,
                "meta": meta or {},
            }
        )


@lru_cache(maxsize=1)
def get_comparison_service() -> ComparisonService:
    """
    Build and cache the comparison service.
    """

    return ComparisonService()
