"""
Recurring Study Session Generator

Expands a recurrence rule and an anchor start time into concrete session
instances that share one recurrence group id.

Rules:
- Every instance reuses the anchor's local time of day (hour, minute, second).
- Enumeration starts on the anchor's calendar date, not on "today", and
  walks forward one day at a time through rule.until (inclusive).
- DAILY emits on every date; WEEKLY emits only on weekdays listed in
  rule.days (Sunday=0). An empty days list emits nothing.
- An anchor dated after rule.until yields an empty batch.
- Without a rule, exactly one plain instance is produced (no group id).

The generator is pure. Persisting the batch is the caller's job and must
happen in a single commit (see StudySessionService.create_recurring).

Usage:
    from study_tracker.services.analytics.recurrence import (
        SessionTemplate,
        generate_sessions,
    )

    batch = generate_sessions(rule, anchor, 45, SessionTemplate(subject_id="..."))
    for instance in batch.instances:
        ...
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from study_tracker.enums.study import FocusType, RecurrenceFrequency, SessionStatus
from study_tracker.models.study import RecurrenceRule
from study_tracker.services.analytics.calendar import date_range, day_of_week, to_local

logger = logging.getLogger(__name__)


@dataclass
class SessionTemplate:
    """Fields copied onto every generated instance."""

    subject_id: str
    title: Optional[str] = None
    focus_type: FocusType = FocusType.DEEP_FOCUS
    status: Optional[SessionStatus] = None


@dataclass
class SessionInstance:
    """A concrete session produced by the generator, not yet persisted."""

    subject_id: str
    duration_minutes: int
    start_time: datetime
    end_time: datetime
    status: SessionStatus
    focus_type: FocusType
    title: Optional[str] = None
    recurrence_group_id: Optional[str] = None


@dataclass
class RecurrenceBatch:
    """All instances generated by one rule invocation."""

    recurrence_group_id: Optional[str]
    instances: list[SessionInstance] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.instances)


def _build_instance(
    start: datetime,
    duration_minutes: int,
    template: SessionTemplate,
    recurrence_group_id: Optional[str],
) -> SessionInstance:
    return SessionInstance(
        subject_id=template.subject_id,
        duration_minutes=duration_minutes,
        start_time=start,
        end_time=start + timedelta(minutes=duration_minutes),
        status=template.status or SessionStatus.PLANNED,
        focus_type=template.focus_type or FocusType.DEEP_FOCUS,
        title=template.title,
        recurrence_group_id=recurrence_group_id,
    )


def generate_sessions(
    rule: Optional[RecurrenceRule],
    anchor_start_time: datetime,
    duration_minutes: int,
    template: SessionTemplate,
    group_id: Optional[str] = None,
) -> RecurrenceBatch:
    """
    Expand a recurrence rule into concrete session instances.

    Args:
        rule: Recurrence rule, or None for a single plain session.
        anchor_start_time: First start time; supplies the time of day.
        duration_minutes: Length of every instance.
        template: Subject, title, focus type and optional status to copy.
        group_id: Recurrence group id to use (a fresh UUID when omitted).

    Returns:
        RecurrenceBatch with instances ordered by start time.
    """
    if rule is None:
        instance = _build_instance(anchor_start_time, duration_minutes, template, None)
        return RecurrenceBatch(recurrence_group_id=None, instances=[instance])

    recurrence_group_id = group_id or str(uuid.uuid4())
    batch = RecurrenceBatch(recurrence_group_id=recurrence_group_id)

    anchor = to_local(anchor_start_time)
    first_date = anchor.date()

    if first_date > rule.until:
        logger.info(
            f"Recurrence anchor {first_date} is after until={rule.until}, "
            "no sessions generated"
        )
        return batch

    if rule.frequency == RecurrenceFrequency.WEEKLY and not rule.days:
        logger.warning("WEEKLY recurrence rule without days, no sessions generated")
        return batch

    weekdays = set(rule.days)

    for current in date_range(first_date, rule.until):
        if rule.frequency == RecurrenceFrequency.WEEKLY and day_of_week(current) not in weekdays:
            continue

        # Same wall-clock time on the target date (tzinfo carried from the anchor)
        start = anchor.replace(
            year=current.year,
            month=current.month,
            day=current.day,
            microsecond=0,
        )
        batch.instances.append(
            _build_instance(start, duration_minutes, template, recurrence_group_id)
        )

    logger.debug(
        f"Generated {len(batch)} {rule.frequency.value} sessions "
        f"for group {recurrence_group_id}"
    )
    return batch
