"""Anchor Engine - Reference date for interval-based recurrence.

Biweekly parity, monthly intervals and yearly intervals all count elapsed
periods from a habit's *anchor*. Resolution order:

    1. `anchorDate` if parseable
    2. `createdAt` if parseable
    3. Legacy id prefix (13-digit epoch milliseconds)
    4. Unix epoch

Resolution never raises. Unparseable candidates are skipped, not fatal.

IMPORTANT: The legacy id heuristic lives ONLY in `_anchor_from_legacy_id`.
Delete that helper (and step 3 above) once stored habits carry `createdAt`.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import as_local, dt_from_epoch_ms, dt_parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping

EPOCH: datetime = datetime(1970, 1, 1, tzinfo=UTC)


def resolve_anchor(habit: Mapping[str, Any]) -> datetime:
    """Return the timezone-aware anchor datetime for a habit.

    Args:
        habit: Habit record.

    Returns:
        First parseable of anchorDate, createdAt, legacy id timestamp;
        otherwise the Unix epoch.
    """
    for field in (const.DATA_HABIT_ANCHOR_DATE, const.DATA_HABIT_CREATED_AT):
        raw = habit.get(field)
        if not raw:
            continue
        parsed = dt_parse_timestamp(raw)
        if parsed is not None:
            return parsed
        const.LOGGER.debug(
            "AnchorEngine: Ignoring unparseable %s=%r for habit %s",
            field,
            raw,
            habit.get(const.DATA_HABIT_ID),
        )

    legacy = _anchor_from_legacy_id(habit.get(const.DATA_HABIT_ID))
    if legacy is not None:
        return legacy

    return EPOCH


def get_anchor_date(habit: Mapping[str, Any]) -> date:
    """Return the local calendar day of the habit's anchor."""
    return as_local(resolve_anchor(habit)).date()


def _anchor_from_legacy_id(habit_id: Any) -> datetime | None:
    """Decode the creation time old ids carry as an epoch-millisecond prefix."""
    if not isinstance(habit_id, str):
        return None
    prefix = habit_id[: const.LEGACY_ID_TIMESTAMP_DIGITS]
    # str.isdigit() alone accepts non-ASCII digits
    if len(prefix) != const.LEGACY_ID_TIMESTAMP_DIGITS or not (
        prefix.isascii() and prefix.isdigit()
    ):
        return None
    return dt_from_epoch_ms(int(prefix))
