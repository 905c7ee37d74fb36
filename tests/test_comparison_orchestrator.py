"""
tests/test_comparison_orchestrator.py

End-to-end tests for the comparison pipeline.

Exercises consolidation, scoring, ranking, insights and charts together
through ComparisonOrchestrator, including the degenerate batches the
engine must accept without raising.
"""

from __future__ import annotations

import math

import pytest

from comparison.base import BaseScoringModel
from comparison.models import AxisScores, InputRow, NormalizedCountry, Weights
from comparison.orchestrator import ComparisonOrchestrator, build_comparison


def _row(country: str, access=None, infra=None, capacity=None, year=None) -> InputRow:
    return InputRow(
        country=country,
        year=year,
        access_internet_pct=access,
        fixed_broadband_subs_per100=infra,
        broadband_speed_mbps=capacity,
    )


@pytest.fixture()
def mixed_rows() -> list[InputRow]:
    return [
        _row("Peru", access=71.0, capacity=3.2, year=2022),
        _row("Chile", access=94.5, infra=23.0, capacity=24.0, year=2022),
        _row("Peru", infra=10.4),
        _row("Bolivia", access=66.0, infra=None, capacity=math.nan),
        _row("Colombia", access=77.3, infra=17.0, capacity=17.0, year=2022),
    ]


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_two_countries_with_full_data(self) -> None:
        result = build_comparison(
            [
                _row("Chile", 94.5, 23, 24),
                _row("Colombia", 77.3, 17, 17),
            ]
        )

        assert result.weights.to_dict() == pytest.approx(
            {"access": 1 / 3, "infra": 1 / 3, "capacity": 1 / 3}
        )
        chile, colombia = result.comparison
        assert (chile.country, chile.score, chile.rank) == ("Chile", 1.0, 1)
        assert (colombia.country, colombia.score, colombia.rank) == ("Colombia", 0.0, 2)
        assert chile.norm == AxisScores(1.0, 1.0, 1.0)
        assert colombia.norm == AxisScores(0.0, 0.0, 0.0)
        assert result.insights[0] == "Top score is Chile (1)."

    def test_single_active_axis_scores_equal_its_norm(self) -> None:
        result = build_comparison(
            [
                _row("A", access=50),
                _row("B", access=100),
                _row("C", access=75),
            ]
        )

        assert result.weights == Weights(access=1.0)
        for country in result.comparison:
            assert country.score == country.norm.access
            assert country.norm.infra == 0.5
            assert country.norm.capacity == 0.5
        assert [country.country for country in result.comparison] == ["B", "C", "A"]

    def test_single_country(self) -> None:
        result = build_comparison([_row("Chile", access=90)])

        assert len(result.comparison) == 1
        only = result.comparison[0]
        assert only.norm.access == 1.0
        assert only.score == 1.0
        assert only.rank == 1

    def test_empty_batch(self) -> None:
        result = build_comparison([])

        assert result.comparison == []
        assert result.weights == Weights()
        assert result.insights == []
        assert result.charts["radar"]["datasets"] == []
        assert result.charts["bars"]["labels"] == []


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


class TestInvariants:
    def test_one_entry_per_distinct_country(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        names = [country.country for country in result.comparison]
        assert sorted(names) == sorted({row.country for row in mixed_rows})

    def test_norms_and_scores_are_bounded(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        for country in result.comparison:
            assert all(0.0 <= value <= 1.0 for value in country.norm.as_list())
            assert 0.0 <= country.score <= 1.0

    def test_ranks_are_a_permutation_in_score_order(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        ranks = [country.rank for country in result.comparison]
        scores = [country.score for country in result.comparison]
        assert ranks == list(range(1, len(ranks) + 1))
        assert scores == sorted(scores, reverse=True)

    def test_scores_have_at_most_two_decimals(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        for country in result.comparison:
            assert round(country.score, 2) == country.score

    def test_duplicate_rows_are_merged_first_wins(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        peru = next(country for country in result.comparison if country.country == "Peru")
        assert peru.access_internet_pct == 71.0
        assert peru.fixed_broadband_subs_per100 == 10.4
        assert peru.year == 2022

    def test_missing_value_is_neutral(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        bolivia = next(country for country in result.comparison if country.country == "Bolivia")
        assert bolivia.norm.infra == 0.5
        assert bolivia.norm.capacity == 0.5

    def test_same_input_same_output(self, mixed_rows: list[InputRow]) -> None:
        first = build_comparison(mixed_rows)
        second = build_comparison(list(mixed_rows))

        assert first == second

    def test_input_rows_are_not_mutated(self, mixed_rows: list[InputRow]) -> None:
        snapshot = [row.to_dict() for row in mixed_rows]

        build_comparison(mixed_rows)

        assert [row.to_dict() for row in mixed_rows] == snapshot

    def test_charts_follow_comparison_order(self, mixed_rows: list[InputRow]) -> None:
        result = build_comparison(mixed_rows)

        names = [country.country for country in result.comparison]
        assert [dataset["label"] for dataset in result.charts["radar"]["datasets"]] == names
        assert result.charts["bars"]["labels"] == names
        assert result.charts["bars"]["datasets"][0]["data"] == [
            country.score for country in result.comparison
        ]


# ---------------------------------------------------------------------------
# Injected model
# ---------------------------------------------------------------------------


class _ReverseAlphabetModel(BaseScoringModel):
    def compute(self, countries):
        scored = [
            NormalizedCountry(
                country=country.country,
                year=country.year,
                access_internet_pct=country.access_internet_pct,
                fixed_broadband_subs_per100=country.fixed_broadband_subs_per100,
                broadband_speed_mbps=country.broadband_speed_mbps,
                mobile_data_cost_pct_income=country.mobile_data_cost_pct_income,
                norm=AxisScores(0.5, 0.5, 0.5),
                score=0.1 * index,
            )
            for index, country in enumerate(sorted(countries, key=lambda c: c.country))
        ]
        return scored, Weights(access=1.0)


def test_orchestrator_uses_injected_model() -> None:
    result = ComparisonOrchestrator(model=_ReverseAlphabetModel()).build(
        [_row("Alpha", access=1), _row("Charlie", access=2), _row("Bravo", access=3)]
    )

    assert [country.country for country in result.comparison] == ["Charlie", "Bravo", "Alpha"]
    assert result.weights == Weights(access=1.0)


def test_extreme_magnitudes_do_not_raise() -> None:
    result = build_comparison(
        [
            _row("A", access=1e308),
            _row("B", access=-1e308),
            _row("C", access=10**400),
        ]
    )

    by_name = {country.country: country for country in result.comparison}
    assert by_name["A"].score == 1.0
    assert by_name["B"].score == 0.0
    assert by_name["C"].access_internet_pct is None
    assert by_name["C"].norm.access == 0.5
    assert result.insights[0] == "Top score is A (1)."
