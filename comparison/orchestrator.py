"""
comparison/orchestrator.py

Runs the comparison pipeline end to end:

    consolidate -> score -> rank -> insights -> charts

Contains no normalization or scoring math of its own. Holds no state
between calls, so one instance can be shared across requests.
"""

from __future__ import annotations

import logging
from typing import Sequence

from comparison.base import BaseScoringModel
from comparison.charts import to_bar_dataset, to_radar_dataset
from comparison.consolidation import consolidate
from comparison.insights import derive_insights
from comparison.models import ComparisonResult, InputRow
from comparison.scoring import UniformWeightModel, rank_countries

logger = logging.getLogger(__name__)


class ComparisonOrchestrator:
    """Coordinates the comparison stages for one batch of rows.

    The scoring model is injectable; it defaults to UniformWeightModel.
    """

    def __init__(self, model: BaseScoringModel | None = None) -> None:
        self._model = model or UniformWeightModel()

    def build(self, rows: Sequence[InputRow]) -> ComparisonResult:
        """Build the ranked comparison, weights, insights and chart datasets.

        Never raises for degenerate batches: an empty row set produces an
        empty comparison with zero weights and no insights.

        Args:
            rows: The complete row set for one request.

        Returns:
            A freshly constructed ComparisonResult.
        """
        consolidated = consolidate(rows)
        scored, weights = self._model.compute(consolidated)
        ranked = rank_countries(scored)
        insights = derive_insights(ranked, weights)

        logger.debug(
            "Comparison built rows=%s countries=%s weights=%s",
            len(rows),
            len(ranked),
            weights,
        )

        return ComparisonResult(
            comparison=ranked,
            weights=weights,
            insights=insights,
            charts={
                "radar": to_radar_dataset(ranked),
                "bars": to_bar_dataset(ranked),
            },
        )


def build_comparison(rows: Sequence[InputRow]) -> ComparisonResult:
    """Run the default pipeline over ``rows``."""
    return ComparisonOrchestrator().build(rows)
