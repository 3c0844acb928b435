"""Todo data model for Todoster."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

from .utils.datetime import ensure_aware, to_iso_string, parse_iso


@dataclass
class Todo:
    """A single task in the list.

    Fields:
        text: Free-form description.
        complete: Completion flag.
        complete_date: Instant the task was completed (None while incomplete).
        repeat_days: Days after completion at which the task resets to
            incomplete. None means it never resets.
    """

    text: str
    complete: bool = False
    complete_date: Optional[datetime] = None
    repeat_days: Optional[int] = None

    def __post_init__(self):
        self.complete_date = ensure_aware(self.complete_date)

    def mark_complete(self, now: datetime):
        """Mark the task as completed at ``now``."""
        self.complete = True
        self.complete_date = ensure_aware(now)

    def mark_incomplete(self):
        """Reopen the task and forget its completion instant."""
        self.complete = False
        self.complete_date = None

    @property
    def is_repeating(self) -> bool:
        return self.repeat_days is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Todo to a dictionary with ISO timestamp strings."""
        return {
            "text": self.text,
            "complete": self.complete,
            "complete_date": to_iso_string(self.complete_date),
            "repeat_days": self.repeat_days,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Todo":
        """Create a Todo from a dictionary.

        Raises:
            ValueError: If the record is missing its text or holds values of
                the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Task record must be a mapping, got {type(data).__name__}")

        text = data.get("text")
        if text is None:
            raise ValueError("Task record has no 'text'")

        complete = data.get("complete", False)
        if not isinstance(complete, bool):
            raise ValueError(f"'complete' must be true or false, got {complete!r}")

        repeat_days = data.get("repeat_days")
        if repeat_days is not None:
            # bool is an int subclass; reject it explicitly
            if isinstance(repeat_days, bool) or not isinstance(repeat_days, int):
                raise ValueError(f"'repeat_days' must be an integer, got {repeat_days!r}")
            if repeat_days < 0:
                raise ValueError(f"'repeat_days' must not be negative, got {repeat_days}")

        return cls(
            text=str(text),
            complete=complete,
            complete_date=parse_iso(data.get("complete_date")),
            repeat_days=repeat_days,
        )
