"""Tests for the View Projector."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from quickbill.models.expense import ExpenseCategory, PeriodFilter
from quickbill.queries import (
    ViewProjector,
    period_start,
    start_of_month,
    start_of_week,
)

from tests.conftest import make_expense


MONDAY = date(2024, 6, 10)


@pytest.fixture
def projector():
    return ViewProjector()


@pytest.fixture
def records():
    # Newest first, as the store keeps them
    return [
        make_expense(6, "Coffee", "2.50", ExpenseCategory.FOOD, date(2024, 6, 10)),
        make_expense(5, "Bus", "1.20", ExpenseCategory.TRANSPORT, date(2024, 6, 10)),
        make_expense(4, "Cinema", "12.00", ExpenseCategory.ENTERTAINMENT, date(2024, 6, 9)),
        make_expense(3, "Groceries", "30.00", ExpenseCategory.FOOD, date(2024, 6, 8)),
        make_expense(2, "Electricity", "45.10", ExpenseCategory.BILLS, date(2024, 6, 3)),
        make_expense(1, "Shoes", "60.00", ExpenseCategory.SHOPPING, date(2024, 5, 31)),
    ]


class TestPeriodBoundaries:
    """Tests for period start dates."""

    def test_start_of_week_monday(self):
        """Test a Monday's week starts the day before."""
        assert start_of_week(MONDAY) == date(2024, 6, 9)

    def test_start_of_week_sunday_is_its_own_boundary(self):
        """Test a Sunday is the start of its own week."""
        assert start_of_week(date(2024, 6, 9)) == date(2024, 6, 9)

    def test_start_of_week_saturday(self):
        """Test a Saturday's week started six days earlier."""
        assert start_of_week(date(2024, 6, 15)) == date(2024, 6, 9)

    def test_start_of_week_crosses_month(self):
        """Test the boundary can fall in the previous month."""
        assert start_of_week(date(2024, 6, 1)) == date(2024, 5, 26)

    def test_start_of_month(self):
        """Test the first day of the month."""
        assert start_of_month(date(2024, 6, 10)) == date(2024, 6, 1)
        assert start_of_month(datetime(2024, 2, 29, 23, 0)) == date(2024, 2, 1)

    def test_period_start(self):
        """Test each period's lower bound."""
        assert period_start(PeriodFilter.TODAY, MONDAY) == MONDAY
        assert period_start("Week", MONDAY) == date(2024, 6, 9)
        assert period_start(PeriodFilter.MONTH, MONDAY) == date(2024, 6, 1)
        assert period_start(PeriodFilter.ALL_TIME, MONDAY) is None


class TestProject:
    """Tests for ViewProjector.project."""

    def test_week_excludes_prior_week(self, projector):
        """Test Week keeps this week's Monday and drops last week's."""
        this_week = make_expense(2, day=date(2024, 6, 10))
        last_week = make_expense(1, day=date(2024, 6, 3))
        result = projector.project([this_week, last_week], "All", "Week", MONDAY)
        assert result.visible == (this_week,)

    def test_today(self, projector, records):
        """Test Today keeps only records dated as_of."""
        result = projector.project(records, "All", PeriodFilter.TODAY, MONDAY)
        assert [r.id for r in result.visible] == [6, 5]
        assert result.total == Decimal("3.70")

    def test_week(self, projector, records):
        """Test Week keeps records from Sunday onwards."""
        result = projector.project(records, "All", PeriodFilter.WEEK, MONDAY)
        assert [r.id for r in result.visible] == [6, 5, 4]

    def test_month(self, projector, records):
        """Test Month keeps records from the 1st onwards."""
        result = projector.project(records, "All", PeriodFilter.MONTH, MONDAY)
        assert [r.id for r in result.visible] == [6, 5, 4, 3, 2]
        assert result.total == Decimal("90.80")

    def test_all_time(self, projector, records):
        """Test All Time keeps everything in input order."""
        result = projector.project(records, "All", PeriodFilter.ALL_TIME, MONDAY)
        assert [r.id for r in result.visible] == [6, 5, 4, 3, 2, 1]
        assert result.total == Decimal("150.80")

    def test_category_and_period(self, projector, records):
        """Test both filters apply to the rows."""
        result = projector.project(records, ExpenseCategory.FOOD, PeriodFilter.MONTH, MONDAY)
        assert [r.id for r in result.visible] == [6, 3]
        assert result.total == Decimal("32.50")

    def test_category_filter_by_label(self, projector, records):
        """Test the category filter accepts plain labels."""
        result = projector.project(records, "Bills", PeriodFilter.ALL_TIME, MONDAY)
        assert [r.id for r in result.visible] == [2]

    def test_empty_total_is_zero(self, projector, records):
        """Test an empty selection totals to zero."""
        result = projector.project(records, "Shopping", PeriodFilter.TODAY, MONDAY)
        assert result.visible == ()
        assert result.total == Decimal("0")

    def test_preserves_input_order(self, projector):
        """Test the projector never re-sorts."""
        shuffled = [
            make_expense(1, day=date(2024, 6, 1)),
            make_expense(3, day=date(2024, 6, 10)),
            make_expense(2, day=date(2024, 6, 5)),
        ]
        result = projector.project(shuffled, "All", PeriodFilter.MONTH, MONDAY)
        assert [r.id for r in result.visible] == [1, 3, 2]

    def test_future_dates_pass_lower_bounds(self, projector):
        """Test Week and Month only bound from below."""
        future = make_expense(1, day=date(2024, 7, 4))
        assert projector.project([future], "All", "Week", MONDAY).visible == (future,)
        assert projector.project([future], "All", "Month", MONDAY).visible == (future,)
        assert projector.project([future], "All", "Today", MONDAY).visible == ()

    def test_datetime_as_of(self, projector, records):
        """Test a datetime as_of uses its calendar date."""
        result = projector.project(records, "All", "Today", datetime(2024, 6, 10, 23, 59))
        assert [r.id for r in result.visible] == [6, 5]

    def test_unparsable_amount_counts_as_zero(self, projector):
        """Test a bad amount that slipped into a record sums as zero."""
        good = make_expense(2, amount="5.00")
        bad = make_expense(1).model_copy(update={"amount": "oops"})
        assert projector.sum_amounts([good, bad]) == Decimal("5.00")


class TestDashboard:
    """Tests for the two derived views together."""

    def test_coffee_today(self, projector):
        """Test a single expense today is visible and totalled."""
        coffee = make_expense(1, "Coffee", "2.50", ExpenseCategory.FOOD, MONDAY)
        view = projector.dashboard([coffee], "All", "Today", MONDAY)
        assert view.visible == (coffee,)
        assert view.total == Decimal("2.50")
        assert view.headline_total == Decimal("2.50")

    def test_headline_ignores_category_filter(self, projector):
        """Test the headline total only honours the period filter."""
        coffee = make_expense(1, "Coffee", "2.50", ExpenseCategory.FOOD, MONDAY)
        view = projector.dashboard([coffee], "Transport", "Today", MONDAY)
        assert view.visible == ()
        assert view.total == Decimal("0")
        assert view.headline_total == Decimal("2.50")

    def test_headline_total_helper(self, projector, records):
        """Test headline_total matches an unfiltered-category projection."""
        assert projector.headline_total(records, "Week", MONDAY) == Decimal("15.70")

    def test_dashboard_echoes_filters(self, projector, records):
        """Test the view carries the filters it was built with."""
        view = projector.dashboard(records, None, "Month", datetime(2024, 6, 10, 8, 0))
        assert view.category_filter == "All"
        assert view.period_filter == PeriodFilter.MONTH
        assert view.as_of == MONDAY
        assert view.headline_label == "Month's Spending"

    def test_totals_by_category(self, projector, records):
        """Test the per-category breakdown for a period, largest first."""
        breakdown = projector.totals_by_category(records, "Month", MONDAY)
        assert breakdown == {
            "Bills": Decimal("45.10"),
            "Food": Decimal("32.50"),
            "Entertainment": Decimal("12.00"),
            "Transport": Decimal("1.20"),
        }
        assert list(breakdown) == ["Bills", "Food", "Entertainment", "Transport"]
