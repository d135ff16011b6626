"""
Main Orchestrator for QuickBill

This module ties together all the components and defines the command
handlers the page calls in response to user input:
1. Form submit (add, or update while editing)
2. Edit / delete / clear-all
3. Filter changes and the derived view
4. CSV export

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is deleted without an explicit confirmation flag
- The derived view is recomputed on every read
- Every command is audited

Everything here is synchronous; each command runs to completion before
the page re-renders.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Union

import structlog

from quickbill.audit import AuditLogger
from quickbill.config import Settings, get_settings
from quickbill.errors import QuickBillError
from quickbill.export import NothingToExportError, build_export
from quickbill.models.audit import AuditEventBuilder
from quickbill.models.expense import (
    ALL_CATEGORIES,
    CategoryFilter,
    CsvExport,
    DashboardView,
    Expense,
    ExpenseCategory,
    PeriodFilter,
    coerce_category_filter,
)
from quickbill.queries import ViewProjector
from quickbill.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)
from quickbill.store import ExpenseStore, OnboardingState


logger = structlog.get_logger(__name__)


class ConfirmationRequiredError(QuickBillError):
    """A destructive command was issued before the user confirmed it."""
    pass


class ExpenseTracker:
    """
    Command handlers for the single expense page.

    State held here is page state only: the active filters and which
    expense (if any) the form is editing. The expenses themselves are
    owned by the ExpenseStore.
    """

    def __init__(
        self,
        store: ExpenseStore,
        projector: Optional[ViewProjector] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        export_prefix: str = "QuickBill_Expenses",
        default_period: Union[PeriodFilter, str] = PeriodFilter.TODAY,
    ):
        self._store = store
        self._projector = projector or ViewProjector()
        self._audit_logger = audit_logger
        self._clock = clock or datetime.now
        self._export_prefix = export_prefix
        self._default_period = PeriodFilter(default_period)

        self._category_filter: str = ALL_CATEGORIES
        self._period_filter: PeriodFilter = self._default_period
        self._editing_id: Optional[int] = None

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    @property
    def store(self) -> ExpenseStore:
        return self._store

    @property
    def category_filter(self) -> str:
        return self._category_filter

    @property
    def period_filter(self) -> PeriodFilter:
        return self._period_filter

    @property
    def editing_id(self) -> Optional[int]:
        return self._editing_id

    @property
    def is_editing(self) -> bool:
        return self._editing_id is not None

    # -------------------------------------------------------------------------
    # Form
    # -------------------------------------------------------------------------

    def submit(
        self,
        title: str,
        amount: Union[str, int, float, Decimal],
        category: Union[ExpenseCategory, str],
    ) -> Expense:
        """
        Handle the form's submit button.

        Adds a new expense, or updates the one being edited and leaves
        edit mode. On a validation error nothing changes, including the
        edit mode.

        Raises:
            ValidationError: If the input is invalid
            NotFoundError: If the expense being edited no longer exists
        """
        if self._editing_id is not None:
            expense = self._store.update(self._editing_id, title, amount, category)
            self._editing_id = None
            return expense
        return self._store.add(title, amount, category)

    def begin_edit(self, expense_id: int) -> Expense:
        """
        Put the form into edit mode for an expense.

        Returns the expense so the page can prefill the form.

        Raises:
            NotFoundError: If no expense has this id
        """
        expense = self._store.get(expense_id)
        self._editing_id = expense_id
        return expense

    def cancel_edit(self) -> None:
        self._editing_id = None

    # -------------------------------------------------------------------------
    # Destructive commands
    # -------------------------------------------------------------------------

    def delete(self, expense_id: int, confirmed: bool = False) -> bool:
        """
        Delete an expense the user has confirmed deleting.

        Returns False if the id was not present.

        Raises:
            ConfirmationRequiredError: If confirmed is not True
        """
        if confirmed is not True:
            raise ConfirmationRequiredError(
                "Are you sure you want to delete this expense?"
            )
        removed = self._store.remove(expense_id)
        if self._editing_id == expense_id:
            self._editing_id = None
        return removed

    def clear_all(self, confirmed: bool = False) -> None:
        """
        Erase every expense and reset the page to its starting filters.

        Onboarding completion is kept.

        Raises:
            ConfirmationRequiredError: If confirmed is not True
        """
        if confirmed is not True:
            raise ConfirmationRequiredError(
                "Are you sure you want to clear ALL your QuickBill data? "
                "This cannot be undone."
            )
        self._store.clear()
        self._category_filter = ALL_CATEGORIES
        self._period_filter = self._default_period
        self._editing_id = None

    # -------------------------------------------------------------------------
    # Filters and view
    # -------------------------------------------------------------------------

    def set_category_filter(self, category: Optional[CategoryFilter]) -> None:
        self._category_filter = coerce_category_filter(category)
        self._audit(AuditEventBuilder.filters_changed(
            self._category_filter, self._period_filter.value,
        ))

    def set_period_filter(self, period: Union[PeriodFilter, str]) -> None:
        self._period_filter = PeriodFilter(period)
        self._audit(AuditEventBuilder.filters_changed(
            self._category_filter, self._period_filter.value,
        ))

    def view(self, as_of: Optional[Union[date, datetime]] = None) -> DashboardView:
        """Recompute what the page shows right now."""
        return self._projector.dashboard(
            self._store.records,
            self._category_filter,
            self._period_filter,
            as_of or self._clock(),
        )

    def category_breakdown(
        self,
        as_of: Optional[Union[date, datetime]] = None,
    ) -> dict[str, Decimal]:
        """Period spending per category for the summary chart."""
        return self._projector.totals_by_category(
            self._store.records,
            self._period_filter,
            as_of or self._clock(),
        )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export(self, as_of: Optional[Union[date, datetime]] = None) -> CsvExport:
        """
        Export the visible rows as CSV named after today's date.

        Raises:
            NothingToExportError: If no rows are visible
        """
        now = as_of or self._clock()
        dashboard = self.view(now)
        try:
            export = build_export(dashboard.visible, now, prefix=self._export_prefix)
        except NothingToExportError:
            logger.info("export_rejected", reason="empty_view")
            self._audit(AuditEventBuilder.export_rejected(
                dashboard.category_filter, dashboard.period_filter.value,
            ))
            raise

        return export

    def mark_exported(self, export: CsvExport) -> None:
        """Record that the host saved an export produced by export()."""
        logger.info("export_completed", filename=export.filename, rows=export.row_count)
        self._audit(AuditEventBuilder.export_completed(export.filename, export.row_count))


def create_app_components(
    settings: Optional[Settings] = None,
    kv_store: Optional[KeyValueStoreInterface] = None,
    use_storage: bool = True,
) -> tuple[ExpenseTracker, OnboardingState, AuditLogger]:
    """
    Create all application components with proper wiring.

    Args:
        settings: Settings to use. Defaults to the cached settings.
        kv_store: Key-value store to use. Defaults to the JSON file
            configured in settings.
        use_storage: With False and no kv_store, keep everything in memory.

    Returns:
        (tracker, onboarding, audit_logger)
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    app_settings = settings.app

    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)

    if kv_store is None:
        if use_storage:
            kv_store = JsonFileKeyValueStore(storage_settings.storage_path)
        else:
            kv_store = InMemoryKeyValueStore()

    store = ExpenseStore(
        kv_store,
        key=storage_settings.expenses_key,
        audit_logger=audit_logger,
    )
    store.load()

    onboarding = OnboardingState(
        kv_store,
        key=storage_settings.onboarding_key,
        audit_logger=audit_logger,
    )

    tracker = ExpenseTracker(
        store,
        projector=ViewProjector(),
        audit_logger=audit_logger,
        export_prefix=app_settings.export_prefix,
        default_period=app_settings.default_period,
    )

    logger.info(
        "app_components_created",
        storage=type(kv_store).__name__,
        expenses=len(store),
    )
    return tracker, onboarding, audit_logger
