from unittest.mock import MagicMock

import pytest

from journey_sim.events.factory import EventFactory
from journey_sim.pubsub.bus import EventBus, JourneySharingListeners
from journey_sim.pubsub.channels import (
    ON_TRIP_ETA_UPDATED,
    ON_TRIP_REMAINING_DISTANCE_UPDATED,
    ON_TRIP_STATUS_UPDATED,
    TICK_EVENTS,
)
from journey_sim.trips.session import SimulationSession


@pytest.fixture
def batch(pickup_dropoff_trip, clock):
    session = SimulationSession(pickup_dropoff_trip, clock=clock)
    session.advance()
    return EventFactory.tick_batch(session.snapshot(), include_waypoints=True)


@pytest.mark.unit
class TestEventBus:
    def test_delivers_to_all_subscribers(self, batch):
        bus = EventBus()
        first, second = MagicMock(), MagicMock()
        bus.subscribe(first)
        bus.subscribe(second)

        assert bus.publish(batch[0]) == 2
        first.assert_called_once_with(batch[0])
        second.assert_called_once_with(batch[0])

    def test_event_filter(self, batch):
        bus = EventBus()
        listener = MagicMock()
        bus.subscribe(listener, events=[ON_TRIP_ETA_UPDATED])

        for event in batch:
            bus.publish(event)
        listener.assert_called_once()
        assert listener.call_args.args[0].event_name == ON_TRIP_ETA_UPDATED

    def test_unknown_event_name_rejected(self):
        with pytest.raises(ValueError, match="onTripTeleported"):
            EventBus().subscribe(MagicMock(), events=["onTripTeleported"])

    def test_unsubscribe(self, batch):
        bus = EventBus()
        listener = MagicMock()
        subscription = bus.subscribe(listener)

        subscription.unsubscribe()
        subscription.unsubscribe()
        assert not subscription.active
        assert bus.subscriber_count == 0
        assert bus.publish(batch[0]) == 0
        listener.assert_not_called()

    def test_failing_listener_is_isolated(self, batch):
        bus = EventBus()
        bus.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        healthy = MagicMock()
        bus.subscribe(healthy)

        assert bus.publish(batch[0]) == 1
        healthy.assert_called_once()

    def test_clear(self):
        bus = EventBus()
        subscription = bus.subscribe(MagicMock())
        bus.clear()
        assert bus.subscriber_count == 0
        assert not subscription.active


@pytest.mark.unit
class TestJourneySharingListeners:
    def test_dispatches_named_callbacks(self, batch):
        bus = EventBus()
        on_status = MagicMock()
        on_distance = MagicMock()
        on_waypoints = MagicMock()
        JourneySharingListeners(
            on_trip_status_updated=on_status,
            on_trip_active_route_remaining_distance_updated=on_distance,
            on_trip_remaining_waypoints_updated=on_waypoints,
        ).subscribe(bus)

        for event in batch:
            bus.publish(event)

        trip_info, status = on_status.call_args.args
        assert trip_info["tripId"] == "trip-1"
        assert status == 2
        on_distance.assert_called_once_with(trip_info, 2450.0)
        waypoints = on_waypoints.call_args.args[1]
        assert len(waypoints) == 2

    def test_by_event_skips_unset(self):
        listeners = JourneySharingListeners(on_trip_status_updated=MagicMock())
        assert set(listeners.by_event()) == {ON_TRIP_STATUS_UPDATED}

    def test_unset_callbacks_receive_nothing(self, batch):
        bus = EventBus()
        JourneySharingListeners(
            on_trip_active_route_remaining_distance_updated=MagicMock()
        ).subscribe(bus)
        delivered = [bus.publish(event) for event in batch]
        assert delivered == [
            1 if event.event_name == ON_TRIP_REMAINING_DISTANCE_UPDATED else 0 for event in batch
        ]
        assert len(delivered) == len(TICK_EVENTS) + 1
