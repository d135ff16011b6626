"""
View Projector

DESIGN DECISION: Projection is STATELESS and DETERMINISTIC.
Every call recomputes the filtered rows and totals from the records it is
given. Nothing is cached, so the page can never show a stale total after
a mutation.

Two derived views share the period filter:
- The table rows (and their total) apply BOTH the category and period filters
- The headline total applies ONLY the period filter

``as_of`` is injectable so that period boundaries are testable.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from quickbill.models.expense import (
    ALL_CATEGORIES,
    CategoryFilter,
    DashboardView,
    Expense,
    PeriodFilter,
    Projection,
    coerce_category_filter,
)


AsOf = Union[date, datetime]


def _as_date(as_of: AsOf) -> date:
    if isinstance(as_of, datetime):
        return as_of.date()
    return as_of


def start_of_week(as_of: AsOf) -> date:
    """The most recent Sunday on or before ``as_of``."""
    day = _as_date(as_of)
    # weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(as_of: AsOf) -> date:
    return _as_date(as_of).replace(day=1)


def period_start(period: Union[PeriodFilter, str], as_of: AsOf) -> Optional[date]:
    """
    Lower date bound for a period, or None for All Time.

    For Today the bound is also the only day that matches.
    """
    period = PeriodFilter(period)
    if period is PeriodFilter.TODAY:
        return _as_date(as_of)
    elif period is PeriodFilter.WEEK:
        return start_of_week(as_of)
    elif period is PeriodFilter.MONTH:
        return start_of_month(as_of)
    return None


class ViewProjector:
    """
    Derives what the page shows from the store's records.

    GUARANTEES:
    - Input order is preserved (newest first); rows are never re-sorted
    - Totals are Decimal sums of exactly the selected rows
    - An empty selection totals to zero
    """

    def filter_by_category(
        self,
        records: Iterable[Expense],
        category_filter: Optional[CategoryFilter],
    ) -> list[Expense]:
        label = coerce_category_filter(category_filter)
        if label == ALL_CATEGORIES:
            return list(records)
        return [r for r in records if r.category.value == label]

    def filter_by_period(
        self,
        records: Iterable[Expense],
        period_filter: Union[PeriodFilter, str],
        as_of: AsOf,
    ) -> list[Expense]:
        period = PeriodFilter(period_filter)
        boundary = period_start(period, as_of)

        if boundary is None:
            return list(records)
        if period is PeriodFilter.TODAY:
            return [r for r in records if r.date == boundary]
        # Week and Month only bound from below
        return [r for r in records if r.date >= boundary]

    def sum_amounts(self, records: Iterable[Expense]) -> Decimal:
        """Sum of amounts; unparsable amounts count as zero."""
        return sum((r.amount_value for r in records), Decimal("0"))

    def project(
        self,
        records: Iterable[Expense],
        category_filter: Optional[CategoryFilter],
        period_filter: Union[PeriodFilter, str],
        as_of: AsOf,
    ) -> Projection:
        """Rows matching both filters, and their total."""
        visible = self.filter_by_period(
            self.filter_by_category(records, category_filter),
            period_filter,
            as_of,
        )
        return Projection(visible=tuple(visible), total=self.sum_amounts(visible))

    def headline_total(
        self,
        records: Iterable[Expense],
        period_filter: Union[PeriodFilter, str],
        as_of: AsOf,
    ) -> Decimal:
        """Spending for the period, regardless of the category filter."""
        return self.project(records, ALL_CATEGORIES, period_filter, as_of).total

    def dashboard(
        self,
        records: Iterable[Expense],
        category_filter: Optional[CategoryFilter],
        period_filter: Union[PeriodFilter, str],
        as_of: AsOf,
    ) -> DashboardView:
        """Both derived views for one render of the page."""
        records = list(records)
        projection = self.project(records, category_filter, period_filter, as_of)
        return DashboardView(
            visible=projection.visible,
            total=projection.total,
            headline_total=self.headline_total(records, period_filter, as_of),
            category_filter=coerce_category_filter(category_filter),
            period_filter=PeriodFilter(period_filter),
            as_of=_as_date(as_of),
        )

    def totals_by_category(
        self,
        records: Iterable[Expense],
        period_filter: Union[PeriodFilter, str],
        as_of: AsOf,
    ) -> dict[str, Decimal]:
        """Period spending broken down by category label, largest first."""
        groups: dict[str, Decimal] = {}
        for record in self.filter_by_period(records, period_filter, as_of):
            key = record.category.value
            groups[key] = groups.get(key, Decimal("0")) + record.amount_value
        return dict(sorted(groups.items(), key=lambda item: item[1], reverse=True))
