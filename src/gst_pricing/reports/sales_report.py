"""
Sales Report - Aggregates stored transactions into report tables.

Transactions are the records kept by the storage layer:
    {id, date: "YYYY-MM-DD", total, orderType?, items: [{name, price, quantity, ...}]}
Rendering charts and writing spreadsheets are left to the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..engine.numeric import normalize
from .menu_report import format_size_label

logger = logging.getLogger(__name__)

ITEM_COLUMNS = ['item', 'quantity', 'revenue']
DAILY_COLUMNS = ['date', 'transactions', 'revenue']
SALES_ROW_COLUMNS = [
    'transactionId', 'date', 'orderType', 'itemName', 'size',
    'quantity', 'basePrice', 'finalPrice',
]


def _line_price(item: Mapping) -> float:
    """Unit price of a sold item: price, then finalPrice, else 0."""
    price = normalize(item.get('price'))
    return price or normalize(item.get('finalPrice'))


def _line_quantity(item: Mapping) -> int:
    try:
        quantity = int(float(item.get('quantity')))
    except (TypeError, ValueError, OverflowError):
        return 1
    return quantity or 1


def filter_transactions(
    transactions: Iterable[Mapping],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> list[Mapping]:
    """Keep transactions whose ISO date falls within [start_date, end_date]."""
    kept = []
    for transaction in transactions or []:
        date = str(transaction.get('date') or '')[:10]
        if start_date and date < start_date:
            continue
        if end_date and date > end_date:
            continue
        kept.append(transaction)
    return kept


def build_item_breakdown(transactions: Iterable[Mapping]) -> pd.DataFrame:
    """Quantity sold and revenue per item name, highest revenue first."""
    records = []
    for transaction in transactions or []:
        items = transaction.get('items') or []
        if not isinstance(items, list):
            logger.warning("Transaction %s items is not a list, skipping", transaction.get('id'))
            continue
        for item in items:
            if not item or not item.get('name'):
                logger.warning("Skipping invalid item in transaction %s: %r", transaction.get('id'), item)
                continue
            quantity = _line_quantity(item)
            records.append({
                'item': item['name'],
                'quantity': quantity,
                'revenue': _line_price(item) * quantity,
            })

    if not records:
        return pd.DataFrame(columns=ITEM_COLUMNS)

    df = pd.DataFrame(records)
    breakdown = df.groupby('item', as_index=False, sort=False).agg(
        quantity=('quantity', 'sum'),
        revenue=('revenue', 'sum'),
    )
    breakdown['revenue'] = breakdown['revenue'].map(normalize)
    return breakdown.sort_values('revenue', ascending=False, kind='stable').reset_index(drop=True)


def build_daily_breakdown(transactions: Iterable[Mapping]) -> pd.DataFrame:
    """Transaction count and revenue per day, oldest day first."""
    records = [
        {'date': transaction.get('date'), 'revenue': normalize(transaction.get('total'))}
        for transaction in transactions or []
    ]
    if not records:
        return pd.DataFrame(columns=DAILY_COLUMNS)

    df = pd.DataFrame(records)
    daily = df.groupby('date', as_index=False).agg(
        transactions=('revenue', 'size'),
        revenue=('revenue', 'sum'),
    )
    daily['revenue'] = daily['revenue'].map(normalize)
    return daily.sort_values('date').reset_index(drop=True)[DAILY_COLUMNS]


def build_sales_rows_frame(transactions: Iterable[Mapping]) -> pd.DataFrame:
    """One row per sold item, for the sales export."""
    rows = []
    for transaction in transactions or []:
        order_type = transaction.get('orderType') or 'Dining'
        items = transaction.get('items') or []
        if not isinstance(items, list):
            continue
        for item in items:
            if not item:
                continue
            final_price = item.get('finalPrice')
            rows.append({
                'transactionId': transaction.get('id'),
                'date': transaction.get('date'),
                'orderType': item.get('orderType') or order_type,
                'itemName': item.get('name'),
                'size': format_size_label(item.get('size')),
                'quantity': item.get('quantity') or 1,
                'basePrice': normalize(item.get('basePrice')),
                'finalPrice': normalize(final_price if final_price is not None else item.get('price')),
            })
    return pd.DataFrame(rows, columns=SALES_ROW_COLUMNS)


@dataclass
class SalesReport:
    """Totals and breakdown tables for a reporting period."""
    total_revenue: float
    transaction_count: int
    average_order_value: float
    item_breakdown: pd.DataFrame
    daily_breakdown: pd.DataFrame
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalRevenue": self.total_revenue,
            "totalTransactions": self.transaction_count,
            "averageOrderValue": self.average_order_value,
            "itemBreakdown": self.item_breakdown.to_dict(orient='records'),
            "dailyBreakdown": self.daily_breakdown.to_dict(orient='records'),
            "startDate": self.start_date,
            "endDate": self.end_date,
            "warnings": list(self.warnings),
        }


def summarize_sales(
    transactions: Iterable[Mapping],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> SalesReport:
    """Build the sales report for the transactions within the date range."""
    selected = filter_transactions(transactions, start_date, end_date)
    total_revenue = normalize(sum(normalize(t.get('total')) for t in selected))
    count = len(selected)

    report = SalesReport(
        total_revenue=total_revenue,
        transaction_count=count,
        average_order_value=normalize(total_revenue / count) if count else 0.0,
        item_breakdown=build_item_breakdown(selected),
        daily_breakdown=build_daily_breakdown(selected),
        start_date=start_date,
        end_date=end_date,
    )
    if not count:
        report.warnings.append("No transactions found for the selected period.")
    return report
