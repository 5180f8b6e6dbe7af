"""Unit tests for asset register summaries"""

import pytest
from datetime import date
from decimal import Decimal
from valuation_gateway.domain.assets import depreciation_by_year, disposal_gain_loss, summarize_assets
from valuation_gateway.domain.depreciation import compute_schedule
from valuation_gateway.domain.exceptions import InvalidParameterError
from conftest import make_asset


@pytest.fixture
def register():
    return [
        # Fully depreciated by 2022
        make_asset(asset_id="a", acquisition_cost=Decimal("1000.00"), useful_life=2),
        # One of four periods elapsed on 2025-01-01
        make_asset(
            asset_id="b",
            acquisition_date=date(2024, 1, 1),
            acquisition_cost=Decimal("500.00"),
            salvage_value=Decimal("100.00"),
            useful_life=4,
        ),
        make_asset(asset_id="c", category="vehicles", acquisition_cost=Decimal("300.00"), is_active=False),
    ]


def test_summarize_assets_counts_and_values(register):
    stats = summarize_assets(register, as_of=date(2025, 1, 1))

    assert stats.total_assets == 3
    assert stats.active_assets == 2
    assert stats.inactive_assets == 1
    assert stats.total_purchase_value == Decimal("1800.00")
    assert stats.total_current_value == Decimal("400.00")
    assert stats.accumulated_depreciation == Decimal("1100.00")
    assert stats.flagged == {}


def test_summarize_assets_categories_sorted_by_cost(register):
    stats = summarize_assets(register, as_of=date(2025, 1, 1))

    assert [(c.category, c.count, c.total_cost) for c in stats.categories] == [
        ("equipment", 2, Decimal("1500.00")),
        ("vehicles", 1, Decimal("300.00")),
    ]


def test_depreciation_by_year(register):
    schedules = [compute_schedule(register[0])]

    assert depreciation_by_year(schedules) == {2021: Decimal("500.00"), 2022: Decimal("500.00")}


def test_depreciation_by_year_empty():
    assert depreciation_by_year([]) == {}


def test_disposal_gain(register):
    result = disposal_gain_loss(register[1], date(2025, 1, 1), Decimal("450"))

    assert result.book_value == Decimal("400.00")
    assert result.proceeds == Decimal("450.00")
    assert result.gain_loss == Decimal("50.00")


def test_disposal_loss(register):
    result = disposal_gain_loss(register[1], date(2025, 1, 1), Decimal("0"))
    assert result.gain_loss == Decimal("-400.00")


def test_disposal_rejects_negative_proceeds(register):
    with pytest.raises(InvalidParameterError):
        disposal_gain_loss(register[1], date(2025, 1, 1), Decimal("-1"))
