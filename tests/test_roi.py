"""Tests for ROI schedule and breakeven."""
import pytest

from ambicalc.roi import ANNUAL_INVESTMENT_USD, ROI_YEARS, breakeven, project_roi


def test_project_roi_three_years():
    rows = project_roi(100_000)
    assert len(rows) == ROI_YEARS
    assert [r.year for r in rows] == [1, 2, 3]
    assert rows[0].cum_investment == ANNUAL_INVESTMENT_USD
    assert rows[2].cum_investment == 3 * ANNUAL_INVESTMENT_USD
    assert rows[2].cum_savings == 300_000
    # ROI is the same every year since savings and investment both grow linearly
    assert all(r.roi == pytest.approx(0.5) for r in rows)


def test_project_roi_negative_savings():
    rows = project_roi(-450)
    assert rows[0].cum_savings == -450
    assert rows[0].roi < 0


def test_project_roi_zero_investment():
    rows = project_roi(1000, annual_investment=0)
    assert all(r.roi == 0 for r in rows)


def test_breakeven_months():
    b = breakeven(400_000)
    assert b.kind == "months"
    assert not b.is_never
    # 200k / (400k / 12) = 6 months
    assert b.months == pytest.approx(6)


@pytest.mark.parametrize("savings", [0, -1000])
def test_breakeven_never(savings):
    b = breakeven(savings)
    assert b.is_never
    assert b.months is None
