"""
Core Data Models for QuickBill

These models define the schemas for all expense data flowing through the
system. They are designed to:
1. Enforce the fixed category set and the 2-decimal amount format at runtime
2. Serialize to exactly the JSON shape kept in on-device storage
3. Carry the derived views the page renders

DESIGN DECISION: Expense records are frozen. Updates build a new record
with model_copy() so a stored record can never change underneath a view.
"""

from datetime import date as Date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    The values are the labels shown in the form and written to storage,
    so they are title-cased rather than snake_case.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    BILLS = "Bills"
    MISC = "Misc"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"


class PeriodFilter(str, Enum):
    """Time windows the expense list and headline total can be bounded by."""
    TODAY = "Today"
    WEEK = "Week"
    MONTH = "Month"
    ALL_TIME = "All Time"


# Sentinel category filter meaning "do not filter by category"
ALL_CATEGORIES = "All"

CategoryFilter = Union[ExpenseCategory, str]

CENT = Decimal("0.01")


def normalize_amount(value: Union[str, int, float, Decimal]) -> str:
    """
    Parse an amount and render it with exactly two decimal places.

    Raises ValueError if the value does not parse to a finite number.
    Rounding is half-up, so "2.345" becomes "2.35".
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    if isinstance(value, float):
        value = repr(value)
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"Amount is not a number: {value!r}")
    if not parsed.is_finite():
        raise ValueError(f"Amount must be a finite number: {value!r}")
    # Room for every integer digit, the two decimals and a rounding carry
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, parsed.adjusted() + 4)
        try:
            normalized = parsed.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError(f"Amount is out of range: {value!r}")
        # Avoid persisting "-0.00"
        if normalized.is_zero():
            normalized = abs(normalized)
    return f"{normalized:.2f}"


def parse_amount(value: str) -> Decimal:
    """Parse a stored amount for summing; anything unparsable counts as zero."""
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    The JSON form of this model is exactly what lives in storage:
    {"id": 1718000000000, "title": "Coffee", "amount": "2.50",
     "category": "Food", "date": "2024-06-10"}
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        description="Creation timestamp in milliseconds, unique in the collection"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: str = Field(
        ...,
        description="Amount as a fixed 2-decimal string"
    )
    category: ExpenseCategory = Field(
        ...,
        description="One of the fixed categories"
    )
    date: Date = Field(
        ...,
        description="Local calendar day the expense was recorded"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def normalize_amount_field(cls, v) -> str:
        return normalize_amount(v)

    @field_serializer('date')
    def serialize_date(self, v: Date) -> str:
        return v.isoformat()

    @property
    def amount_value(self) -> Decimal:
        """The amount as a Decimal."""
        return parse_amount(self.amount)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in submitted form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class Projection(BaseModel):
    """Rows selected by a set of filters and their summed amount."""
    model_config = ConfigDict(frozen=True)

    visible: tuple[Expense, ...] = Field(default_factory=tuple)
    total: Decimal = Field(default=Decimal("0"))


class DashboardView(BaseModel):
    """
    Everything the page renders for one set of filters.

    ``visible`` and ``total`` honour both filters. ``headline_total``
    honours only the period filter.
    """
    model_config = ConfigDict(frozen=True)

    visible: tuple[Expense, ...] = Field(default_factory=tuple)
    total: Decimal = Field(default=Decimal("0"))
    headline_total: Decimal = Field(default=Decimal("0"))
    category_filter: str = Field(default=ALL_CATEGORIES)
    period_filter: PeriodFilter = Field(default=PeriodFilter.TODAY)
    as_of: Date

    @property
    def is_empty(self) -> bool:
        return not self.visible

    @property
    def headline_label(self) -> str:
        return period_label(self.period_filter)


class CsvExport(BaseModel):
    """A CSV file ready to be handed to the host's file-save mechanism."""
    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str = Field(default="text/csv;charset=utf-8;")
    content: str
    row_count: int = Field(ge=1)
    created_at: datetime = Field(default_factory=datetime.now)

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")


def period_label(period: Union[PeriodFilter, str]) -> str:
    """Headline caption, e.g. "Week's Spending" or "Total Spending"."""
    period = PeriodFilter(period)
    if period is PeriodFilter.ALL_TIME:
        return "Total Spending"
    return f"{period.value}'s Spending"


def coerce_category_filter(value: Optional[CategoryFilter]) -> str:
    """
    Normalize a category filter to its label.

    None and "All" both mean no filtering. Anything else must be one
    of the fixed categories.
    """
    if value is None or value == ALL_CATEGORIES:
        return ALL_CATEGORIES
    return ExpenseCategory(value).value
