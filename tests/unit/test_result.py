"""Tests for the success/failure envelope."""

import dataclasses

import pytest

from zoom_client.result import Failure, Success


@pytest.mark.unit
def test_success_carries_data():
    result = Success(data={"id": 1})

    assert result.status is True
    assert result.data == {"id": 1}
    assert result.message is None
    assert result.to_dict() == {"status": True, "data": {"id": 1}}


@pytest.mark.unit
def test_success_with_message_only():
    """Status-only operations confirm with a message."""
    result = Success(message="Meeting Ended Successfully")

    assert result.data is None
    assert result.to_dict() == {"status": True, "message": "Meeting Ended Successfully"}


@pytest.mark.unit
def test_success_with_none_data():
    """A bodiless success still reports a data member."""
    assert Success().to_dict() == {"status": True, "data": None}


@pytest.mark.unit
def test_failure():
    result = Failure(message="Something went wrong")

    assert result.status is False
    assert result.data is None
    assert result.to_dict() == {"status": False, "message": "Something went wrong"}


@pytest.mark.unit
def test_status_is_not_a_field():
    """status is fixed by the type, not passed in."""
    assert [f.name for f in dataclasses.fields(Success)] == ["data", "message"]
    assert [f.name for f in dataclasses.fields(Failure)] == ["message"]


@pytest.mark.unit
def test_envelopes_are_immutable():
    result = Success(data=[1])

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.data = [2]
