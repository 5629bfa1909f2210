"""Tests for Event and ReadyState."""

import dataclasses

import pytest

from eventsource_client.types import NO_ID, Event, ReadyState


class TestEvent:
    def test_defaults(self):
        event = Event()
        assert event.id == NO_ID
        assert event.name == "message"
        assert event.data == ""
        assert not event.has_id

    def test_has_id(self):
        assert Event(id=0).has_id

    def test_frozen(self):
        event = Event(data="x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.data = "y"  # type: ignore[misc]

    def test_str(self):
        event = Event(id=3, name="customEvent", data="testonetwo")
        assert str(event) == "Event: customEvent\n\tID: 3\n\tData: testonetwo"


class TestReadyState:
    def test_values_match_browser_constants(self):
        assert ReadyState.CONNECTING.value == 0
        assert ReadyState.OPEN.value == 1
        assert ReadyState.CLOSED.value == 2
