"""
Repeating task scheduling for Todoster

A completed task with a repeat interval becomes due again at local midnight
on the calendar day ``completion date + repeat_days``. Repeats follow calendar
days rather than elapsed hours, so a task finished late in the evening is due
from the start of the target day, and DST shifts never move the due day.
"""

import logging
from datetime import datetime, date, time, timedelta
from typing import Iterable, Optional

from dateutil import tz

from .todo import Todo
from .utils.datetime import local_zone, to_utc

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
SECONDS_PER_HOUR = 60 * 60


def local_midnight(day: date, zone) -> Optional[datetime]:
    """Resolve the start of ``day`` in ``zone``.

    Returns None when midnight falls in a DST gap (it never happens on the
    wall clock) or in a fold (it happens twice), since neither has a single
    answer.
    """
    candidate = datetime.combine(day, time()).replace(tzinfo=zone)
    if not tz.datetime_exists(candidate):
        logger.debug("Midnight of %s does not exist in %s", day, zone)
        return None
    if tz.datetime_ambiguous(candidate):
        logger.debug("Midnight of %s is ambiguous in %s", day, zone)
        return None
    return candidate


def next_due_start(todo: Todo, zone=None) -> Optional[datetime]:
    """Return the instant the task becomes due again, or None.

    The due instant is local midnight of the completion's calendar date plus
    ``repeat_days`` days. Tasks without a completion instant or without a
    repeat interval have no due instant.
    """
    if todo.complete_date is None or todo.repeat_days is None:
        return None

    zone = zone or local_zone()
    done_on = todo.complete_date.astimezone(zone).date()
    try:
        due_day = done_on + timedelta(days=todo.repeat_days)
    except OverflowError:
        # Past date.max; the task can never come due
        return None
    return local_midnight(due_day, zone)


def is_due(todo: Todo, now: datetime, zone=None) -> bool:
    """Check whether a completed task's repeat window has elapsed."""
    if not todo.complete:
        return False

    due_start = next_due_start(todo, zone)
    if due_start is None:
        return False
    return to_utc(now) >= to_utc(due_start)


def reset_if_due(todo: Todo, now: datetime, zone=None) -> Todo:
    """Mark the task incomplete if it is due; return it either way."""
    if is_due(todo, now, zone):
        todo.mark_incomplete()
    return todo


def time_until_due(todo: Todo, now: datetime, zone=None) -> Optional[timedelta]:
    """Return the time left until the task is due.

    Negative when the due instant has already passed. None for incomplete
    tasks and for tasks with no due instant.
    """
    if not todo.complete:
        return None

    due_start = next_due_start(todo, zone)
    if due_start is None:
        return None
    return to_utc(due_start) - to_utc(now)


def auto_reset_repeating(todos: Iterable[Todo], now: datetime, zone=None) -> int:
    """Reset every due task in ``todos``. Returns how many were reset."""
    reset = 0
    for todo in todos:
        was_complete = todo.complete
        if not reset_if_due(todo, now, zone).complete and was_complete:
            reset += 1
    if reset:
        logger.debug("Auto-reset %d repeating task(s)", reset)
    return reset


def describe_repeat(todo: Todo, now: datetime, zone=None) -> str:
    """Human readable repeat status for a completed task."""
    diff = time_until_due(todo, now, zone)

    if diff is None:
        if todo.repeat_days is not None:
            return "repeat: no completion date yet"
        return "no repeat"

    seconds = diff.total_seconds()
    if seconds <= 0:
        # Due day has started (or passed); due from its midnight
        overdue_days = int(-seconds // SECONDS_PER_DAY)
        if overdue_days <= 0:
            return "repeat: due today"
        return f"repeat: overdue by {overdue_days}d"

    days = int(seconds // SECONDS_PER_DAY)
    hours = int((seconds - days * SECONDS_PER_DAY) // SECONDS_PER_HOUR)
    if days >= 1:
        return f"repeat in {days}d, {hours}hrs"
    # Under a full day left reads as due today, never "in 0d"
    return "repeat: due today"
