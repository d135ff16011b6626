"""
Onboarding State

First-run walkthrough progress. Only completion is persisted; the current
step lives in memory and restarts at 1 until the walkthrough is finished
or skipped.
"""

from typing import Optional

import structlog

from quickbill.audit import AuditLogger
from quickbill.models.audit import AuditEventBuilder
from quickbill.services.storage import KeyValueStoreInterface, StorageError


DEFAULT_ONBOARDING_KEY = "quickbill_onboarding_complete"
ONBOARDING_STEPS = 3

logger = structlog.get_logger(__name__)


class OnboardingState:
    """Tracks the three-step walkthrough and its persisted completion flag."""

    def __init__(
        self,
        kv_store: KeyValueStoreInterface,
        key: str = DEFAULT_ONBOARDING_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._kv = kv_store
        self._key = key
        self._audit_logger = audit_logger
        self._step: Optional[int] = None if self.is_complete() else 1

    def is_complete(self) -> bool:
        """
        Whether the walkthrough has been finished or skipped.

        An unreadable flag counts as not complete; the walkthrough shows
        again and finishing it rewrites the flag.
        """
        try:
            value = self._kv.get(self._key)
        except StorageError as e:
            logger.warning("onboarding_flag_unreadable", key=self._key, error=str(e))
            return False
        # Any stored value counts, matching a truthy localStorage lookup
        return bool(value)

    @property
    def current_step(self) -> Optional[int]:
        """1-based step being shown, or None once onboarding is done."""
        return self._step

    def next_step(self) -> Optional[int]:
        """Advance one step; finishing the last step completes onboarding."""
        if self._step is None:
            return None
        if self._step < ONBOARDING_STEPS:
            self._step += 1
            return self._step
        self._finish(skipped=False)
        return None

    def skip(self) -> None:
        if self._step is not None:
            self._finish(skipped=True)

    def complete(self) -> None:
        self._finish(skipped=False)

    def reset(self) -> None:
        """Forget completion so the walkthrough shows again."""
        self._kv.remove(self._key)
        self._step = 1

    def _finish(self, skipped: bool) -> None:
        self._kv.set(self._key, "true")
        self._step = None
        logger.info("onboarding_finished", skipped=skipped)
        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.onboarding_completed(skipped))
