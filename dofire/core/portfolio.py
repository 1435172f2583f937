"""Portfolio aggregation, mirroring the per-user investments view."""

from typing import Iterable

from dofire.models import AssetType, Investment, PortfolioAgg


def aggregate_portfolio(user_id: str, investments: Iterable[Investment]) -> PortfolioAgg:
    """Sum amounts per asset type; shares are percentages rounded to 2 places."""
    sums = {asset_type: 0.0 for asset_type in AssetType}
    for investment in investments:
        sums[investment.type] += investment.amount

    total = sum(sums.values())
    if total <= 0:
        return PortfolioAgg.empty(user_id)

    def share(asset_type: AssetType) -> float:
        return round(sums[asset_type] / total * 100, 2)

    return PortfolioAgg(
        user_id=user_id,
        total_amount=round(total, 2),
        sum_stock=round(sums[AssetType.STOCK], 2),
        sum_etf=round(sums[AssetType.ETF], 2),
        sum_bond=round(sums[AssetType.BOND], 2),
        sum_cash=round(sums[AssetType.CASH], 2),
        share_stock=share(AssetType.STOCK),
        share_etf=share(AssetType.ETF),
        share_bond=share(AssetType.BOND),
        share_cash=share(AssetType.CASH),
    )
