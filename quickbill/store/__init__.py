"""Expense and onboarding persistence package."""

from quickbill.store.expense_store import (
    DEFAULT_EXPENSES_KEY,
    ExpenseStore,
    deserialize_expenses,
    serialize_expenses,
)
from quickbill.store.onboarding import (
    DEFAULT_ONBOARDING_KEY,
    ONBOARDING_STEPS,
    OnboardingState,
)

__all__ = [
    "DEFAULT_EXPENSES_KEY",
    "DEFAULT_ONBOARDING_KEY",
    "ONBOARDING_STEPS",
    "ExpenseStore",
    "OnboardingState",
    "deserialize_expenses",
    "serialize_expenses",
]
