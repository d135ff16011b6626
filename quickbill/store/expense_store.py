"""
Expense Store

DESIGN DECISION: The store is the only owner of the expense collection.
- Every mutation builds a new list, persists it, and only then swaps it in,
  so a failed write never leaves memory and disk disagreeing
- The persisted form is a JSON array of records, newest first
- Loading never raises: unreadable data is logged and treated as empty

Confirmation prompts for remove() and clear() belong to the caller; by the
time these methods run the user has already agreed.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from quickbill.audit import AuditLogger
from quickbill.models.audit import AuditEventBuilder
from quickbill.models.expense import Expense, ExpenseCategory
from quickbill.services.storage import (
    KeyValueStoreInterface,
    NotFoundError,
    StorageCorruptError,
    StorageError,
)
from quickbill.validation import ExpenseValidator, ValidationError


DEFAULT_EXPENSES_KEY = "quickbill_expenses"

logger = structlog.get_logger(__name__)


def serialize_expenses(records: Iterable[Expense]) -> str:
    """Encode records as the JSON array kept in storage."""
    return json.dumps([record.model_dump(mode="json") for record in records])


def deserialize_expenses(raw: str) -> tuple[list[Expense], int]:
    """
    Decode the stored JSON array.

    Returns:
        (records, skipped) where skipped counts entries that were not valid
        expenses or repeated an id already seen.

    Raises:
        StorageCorruptError: If the payload is not a JSON array
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageCorruptError(f"Expense data is not valid JSON: {e}")

    # localStorage.setItem(key, null) style payloads
    if data is None:
        return [], 0
    if not isinstance(data, list):
        raise StorageCorruptError(
            f"Expense data must be a JSON array, got {type(data).__name__}"
        )

    records = []
    seen_ids = set()
    skipped = 0
    for item in data:
        try:
            record = Expense.model_validate(item)
        except PydanticValidationError as e:
            skipped += 1
            logger.warning("expense_record_skipped", reason="invalid", error=str(e))
            continue
        if record.id in seen_ids:
            skipped += 1
            logger.warning("expense_record_skipped", reason="duplicate_id", expense_id=record.id)
            continue
        seen_ids.add(record.id)
        records.append(record)

    return records, skipped


class ExpenseStore:
    """
    Owns the expense collection and keeps it in sync with storage.

    Usage:
        store = ExpenseStore(kv_store)
        store.load()
        expense = store.add("Coffee", "2.5", "Food")
    """

    def __init__(
        self,
        kv_store: KeyValueStoreInterface,
        key: str = DEFAULT_EXPENSES_KEY,
        clock: Optional[Callable[[], datetime]] = None,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the store. Call load() to rehydrate from storage.

        Args:
            kv_store: Durable key-value port
            key: Slot holding the JSON-encoded collection
            clock: Returns the current local time; used for ids and dates
            validator: Form validator
            audit_logger: Where to record mutations. Optional.
        """
        self._kv = kv_store
        self._key = key
        self._clock = clock or datetime.now
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger
        self._records: list[Expense] = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def records(self) -> tuple[Expense, ...]:
        """Snapshot of the collection, newest first."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(tuple(self._records))

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> list[Expense]:
        """
        Rehydrate the collection from storage.

        Missing data loads as an empty collection. Corrupt data is logged,
        the collection is reset to empty, and an empty list is returned.
        """
        try:
            raw = self._kv.get(self._key)
            if raw is None:
                records, skipped = [], 0
            else:
                records, skipped = deserialize_expenses(raw)
        except StorageCorruptError as e:
            logger.error("expenses_load_failed", key=self._key, reason="corrupt", error=str(e))
            self._audit(AuditEventBuilder.storage_corrupt(self._key, str(e)))
            self._records = []
            return []
        except StorageError as e:
            logger.error("expenses_load_failed", key=self._key, reason="read_failed", error=str(e))
            self._audit(AuditEventBuilder.storage_read_failed(self._key, str(e)))
            self._records = []
            return []

        self._records = records
        self._audit(AuditEventBuilder.expenses_loaded(len(records), skipped))
        return list(records)

    def persist(self, records: Sequence[Expense]) -> None:
        """
        Overwrite the storage slot with the full collection.

        Raises:
            StorageError: If the write fails
        """
        self._kv.set(self._key, serialize_expenses(records))

    def _commit(self, records: list[Expense]) -> None:
        self.persist(records)
        self._records = records

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _next_id(self, now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        taken = {record.id for record in self._records}
        while candidate in taken:
            candidate += 1
        return candidate

    def add(
        self,
        title: str,
        amount: Union[str, int, float, Decimal],
        category: Union[ExpenseCategory, str],
    ) -> Expense:
        """
        Record a new expense dated today and put it at the top.

        Raises:
            ValidationError: If title, amount or category is invalid
            StorageError: If the write fails
        """
        try:
            title, amount, category = self._validator.validate(title, amount, category)
        except ValidationError as e:
            self._audit(AuditEventBuilder.validation_failed("add", e.to_dicts()))
            raise

        now = self._clock()
        expense = Expense(
            id=self._next_id(now),
            title=title,
            amount=amount,
            category=category,
            date=now.date(),
        )
        self._commit([expense] + self._records)

        logger.info("expense_added", expense_id=expense.id)
        self._audit(AuditEventBuilder.expense_added(
            expense_id=expense.id,
            title=expense.title,
            amount=expense.amount,
            category=expense.category.value,
        ))
        return expense

    def get(self, expense_id: int) -> Expense:
        """
        Find an expense by id.

        Raises:
            NotFoundError: If no expense has this id
        """
        for record in self._records:
            if record.id == expense_id:
                return record
        raise NotFoundError(f"Expense not found: {expense_id}")

    def update(
        self,
        expense_id: int,
        title: str,
        amount: Union[str, int, float, Decimal],
        category: Union[ExpenseCategory, str],
    ) -> Expense:
        """
        Replace title, amount and category of an existing expense.

        The id, date and position in the collection are kept.

        Raises:
            ValidationError: If title, amount or category is invalid
            NotFoundError: If no expense has this id
            StorageError: If the write fails
        """
        try:
            title, amount, category = self._validator.validate(title, amount, category)
        except ValidationError as e:
            self._audit(AuditEventBuilder.validation_failed(
                "update", e.to_dicts(), expense_id=expense_id,
            ))
            raise

        original = self.get(expense_id)
        updated = original.model_copy(update={
            "title": title,
            "amount": amount,
            "category": category,
        })
        self._commit([
            updated if record.id == expense_id else record
            for record in self._records
        ])

        changes = {
            field: getattr(updated, field)
            for field in ("title", "amount", "category")
            if getattr(updated, field) != getattr(original, field)
        }
        logger.info("expense_updated", expense_id=expense_id, fields=sorted(changes))
        self._audit(AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            changes={k: str(getattr(v, "value", v)) for k, v in changes.items()},
        ))
        return updated

    def remove(self, expense_id: int) -> bool:
        """
        Delete an expense.

        Returns:
            True if an expense was deleted, False if the id was not present
            (nothing is written in that case)
        """
        target = next((r for r in self._records if r.id == expense_id), None)
        if target is None:
            logger.debug("expense_remove_noop", expense_id=expense_id)
            return False

        self._commit([r for r in self._records if r.id != expense_id])

        logger.info("expense_deleted", expense_id=expense_id)
        self._audit(AuditEventBuilder.expense_deleted(expense_id, target.title))
        return True

    def clear(self) -> None:
        """Delete every expense and erase the storage slot."""
        count = len(self._records)
        self._kv.remove(self._key)
        self._records = []

        logger.info("expenses_cleared", record_count=count)
        self._audit(AuditEventBuilder.expenses_cleared(count))

