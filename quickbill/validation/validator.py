"""
Expense Form Validation

Checks what the user typed into the add/edit form before anything is
stored:
- Title must be present (surrounding whitespace does not count)
- Amount must parse to a finite number; its sign is not constrained
- Category must be one of the fixed categories

IMPORTANT: Validation collects every problem rather than stopping at the
first one, so the page can show them all at once. When any issue is
found nothing is mutated.
"""

from decimal import Decimal
from typing import Union

from quickbill.errors import QuickBillError
from quickbill.models.expense import (
    ExpenseCategory,
    ValidationIssue,
    normalize_amount,
)


class ValidationError(QuickBillError):
    """Submitted title, amount or category is not acceptable."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))

    def to_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


class ExpenseValidator:
    """Validates and normalizes expense form input."""

    def validate(
        self,
        title: str,
        amount: Union[str, int, float, Decimal],
        category: Union[ExpenseCategory, str],
    ) -> tuple[str, str, ExpenseCategory]:
        """
        Validate form input.

        Returns:
            (title, amount, category) with title stripped, amount
            normalized to two decimals and category as the enum.

        Raises:
            ValidationError: listing every issue found
        """
        issues = []

        clean_title = title.strip() if isinstance(title, str) else ""
        if not clean_title:
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Please enter a title for the expense",
            ))

        clean_amount = None
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an amount",
            ))
        else:
            try:
                clean_amount = normalize_amount(amount)
            except ValueError:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="not_a_number",
                    message=f"Amount must be a number, got {amount!r}",
                ))

        clean_category = None
        try:
            clean_category = ExpenseCategory(category)
        except ValueError:
            allowed = ", ".join(c.value for c in ExpenseCategory)
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Unknown category {category!r}. Choose one of: {allowed}",
            ))

        if issues:
            raise ValidationError(issues)

        return clean_title, clean_amount, clean_category
