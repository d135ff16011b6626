"""View projection package."""

from quickbill.queries.projector import (
    ViewProjector,
    period_start,
    start_of_month,
    start_of_week,
)

__all__ = ["ViewProjector", "period_start", "start_of_month", "start_of_week"]
