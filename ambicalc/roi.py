"""Multi-year ROI schedule and breakeven (pure functions)."""
from ambicalc.models import Breakeven, RoiRow

# Tunable product assumptions: yearly license investment and projection horizon
ANNUAL_INVESTMENT_USD = 200_000
ROI_YEARS = 3


def project_roi(
    annual_savings: float,
    annual_investment: float = ANNUAL_INVESTMENT_USD,
    years: int = ROI_YEARS,
) -> list[RoiRow]:
    """
    cum_investment = annual_investment * year
    cum_savings = annual_savings * year
    roi = cum_savings / cum_investment (0 when there is no investment)
    """
    rows = []
    for year in range(1, years + 1):
        cum_investment = annual_investment * year
        cum_savings = annual_savings * year
        rows.append(RoiRow(
            year=year,
            cum_investment=cum_investment,
            cum_savings=cum_savings,
            roi=cum_savings / cum_investment if cum_investment > 0 else 0.0,
        ))
    return rows


def breakeven(annual_savings: float, annual_investment: float = ANNUAL_INVESTMENT_USD) -> Breakeven:
    """Months until cumulative savings cover the investment; "never" without positive savings."""
    monthly_savings = annual_savings / 12
    if monthly_savings > 0:
        return Breakeven(kind="months", months=annual_investment / monthly_savings)
    return Breakeven(kind="never")
