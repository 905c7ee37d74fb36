"""
comparison/base.py

Abstract base interface for composite scoring models.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from comparison.models import ConsolidatedCountry, NormalizedCountry, Weights


class BaseScoringModel(ABC):
    """Abstract base class for composite scoring models.

    A scoring model turns consolidated raw metrics into normalized axis
    values, batch-level weights and one composite score per country.
    """

    @abstractmethod
    def compute(
        self, countries: Sequence[ConsolidatedCountry]
    ) -> tuple[list[NormalizedCountry], Weights]:
        """Score a consolidated batch.

        Args:
            countries: One record per country, in batch order.

        Returns:
            The scored countries (same order as the input, unranked) and
            the weights that were applied.
        """
        raise NotImplementedError("Subclasses must implement compute()")
