"""Tests for Deadline."""

import pytest

from workforce.data.deadline import Deadline, check_deadline
from workforce.utils.errors import StoreTimeoutError


def test_unbounded_deadline_is_not_expired():
    deadline = Deadline()

    assert deadline.remaining() is None
    assert deadline.expired is False
    deadline.check("noop")


def test_elapsed_deadline_raises_timeout():
    deadline = Deadline.after(0)

    with pytest.raises(StoreTimeoutError) as exc_info:
        deadline.check("list departments")

    assert exc_info.value.details["reason"] == "deadline_exceeded"
    assert exc_info.value.error_code == "store_timeout"


def test_cancel_reports_cancelled():
    deadline = Deadline.after(60)
    deadline.cancel()

    with pytest.raises(StoreTimeoutError) as exc_info:
        deadline.check("save employee")

    assert deadline.cancelled is True
    assert exc_info.value.details["reason"] == "cancelled"


def test_remaining_never_negative():
    assert Deadline.after(-5).remaining() == 0.0


def test_check_deadline_accepts_none():
    check_deadline(None, "noop")
