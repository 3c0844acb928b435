"""Tests for Todo model."""

import pytest
from datetime import datetime, timezone, timedelta

from todoster.todo import Todo


class TestTodo:
    """Test Todo model functionality."""

    def test_todo_creation(self):
        """Test basic todo creation."""
        todo = Todo(text="Feed gecko", repeat_days=2)

        assert todo.text == "Feed gecko"
        assert todo.complete is False
        assert todo.complete_date is None
        assert todo.repeat_days == 2
        assert todo.is_repeating

    def test_todo_completion(self):
        """Test todo completion records the instant."""
        now = datetime(2026, 1, 1, 13, 0, tzinfo=timezone.utc)
        todo = Todo(text="Test task")

        todo.mark_complete(now)

        assert todo.complete is True
        assert todo.complete_date == now

    def test_todo_reopen(self):
        """Test marking a completed todo incomplete."""
        todo = Todo(text="Test task")
        todo.mark_complete(datetime.now(timezone.utc))

        todo.mark_incomplete()

        assert not todo.complete
        assert todo.complete_date is None

    def test_naive_completion_becomes_aware(self):
        """Naive datetimes are treated as local time."""
        todo = Todo(text="Test task")
        todo.mark_complete(datetime(2026, 1, 1, 13, 0))

        assert todo.complete_date.tzinfo is not None
        assert todo.complete_date.hour == 13


class TestTodoSerialization:
    """Test dict round-trips keep optional fields' presence."""

    def test_to_dict(self):
        """Test serialization writes an ISO timestamp with offset."""
        done_at = datetime(2026, 1, 1, 13, 0, tzinfo=timezone(timedelta(hours=1)))
        todo = Todo(text="Feed gecko", complete=True, complete_date=done_at, repeat_days=2)

        data = todo.to_dict()

        assert data == {
            "text": "Feed gecko",
            "complete": True,
            "complete_date": "2026-01-01T13:00:00+01:00",
            "repeat_days": 2,
        }

    def test_to_dict_without_optionals(self):
        """Absent optional fields serialize as None."""
        data = Todo(text="One-off").to_dict()

        assert data["complete_date"] is None
        assert data["repeat_days"] is None

    def test_from_dict(self):
        """Test parsing a stored record."""
        todo = Todo.from_dict({
            "text": "Feed gecko",
            "complete": True,
            "complete_date": "2026-01-01T13:00:00+01:00",
            "repeat_days": 0,
        })

        assert todo.complete
        assert todo.complete_date == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert todo.complete_date.utcoffset() == timedelta(hours=1)
        assert todo.repeat_days == 0

    def test_from_dict_defaults(self):
        """Missing optional keys read as absent."""
        todo = Todo.from_dict({"text": "Minimal"})

        assert todo == Todo(text="Minimal")

    @pytest.mark.parametrize("record", [
        {},
        {"text": "x", "complete": "yes"},
        {"text": "x", "repeat_days": "2"},
        {"text": "x", "repeat_days": -1},
        {"text": "x", "repeat_days": True},
        {"text": "x", "complete": True, "complete_date": "yesterday"},
        ["not", "a", "mapping"],
    ])
    def test_from_dict_rejects_invalid_records(self, record):
        """Invalid records raise ValueError instead of being guessed at."""
        with pytest.raises(ValueError):
            Todo.from_dict(record)
