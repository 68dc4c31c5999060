"""Event factory building feed events from session snapshots."""

from typing import TYPE_CHECKING, Any, TypeVar

from journey_sim.core.correlation import get_current_session_id
from journey_sim.events.schemas import (
    EtaUpdated,
    JourneyEvent,
    LocationMessage,
    RemainingDistanceUpdated,
    RemainingWaypointsUpdated,
    TripInfoMessage,
    TripStatusUpdated,
    VehicleLocationMessage,
    VehicleLocationUpdated,
    WaypointMessage,
)

if TYPE_CHECKING:
    from journey_sim.engine.snapshots import SessionSnapshot
    from journey_sim.trip import TripWaypoint

T = TypeVar("T", bound=JourneyEvent)


def waypoint_message(waypoint: "TripWaypoint") -> WaypointMessage:
    return WaypointMessage(
        id=waypoint.id,
        location=LocationMessage(lat=waypoint.location.lat, lng=waypoint.location.lng),
        waypoint_type=int(waypoint.waypoint_type),
        trip_id=waypoint.trip_id,
        title=waypoint.title,
    )


class EventFactory:
    """Factory for creating events with trip info and tracing fields populated."""

    @staticmethod
    def trip_info(snapshot: "SessionSnapshot") -> TripInfoMessage:
        return TripInfoMessage(
            trip_id=snapshot.trip_id,
            trip_status=int(snapshot.status),
            remaining_waypoints=[waypoint_message(wp) for wp in snapshot.waypoints],
        )

    @staticmethod
    def create(
        event_class: type[T],
        snapshot: "SessionSnapshot",
        *,
        trip_info: TripInfoMessage | None = None,
        **kwargs: Any,
    ) -> T:
        """Create an event for a snapshot.

        Args:
            event_class: The event class to instantiate
            snapshot: Session state the event reports on
            trip_info: Pre-built trip info, shared across one tick's batch
            **kwargs: Event-specific payload fields
        """
        return event_class(
            session_id=snapshot.session_id or get_current_session_id(),
            correlation_id=snapshot.trip_id,
            trip_info=trip_info or EventFactory.trip_info(snapshot),
            tick=snapshot.tick,
            **kwargs,
        )

    @staticmethod
    def tick_batch(
        snapshot: "SessionSnapshot", include_waypoints: bool = False
    ) -> list[JourneyEvent]:
        """Events published after one tick: status, location, ETA, distance.

        With include_waypoints, a remaining-waypoints event follows the four.
        """
        info = EventFactory.trip_info(snapshot)
        telemetry = snapshot.telemetry
        batch: list[JourneyEvent] = [
            EventFactory.create(
                TripStatusUpdated, snapshot, trip_info=info, status=int(snapshot.status)
            ),
            EventFactory.create(
                VehicleLocationUpdated,
                snapshot,
                trip_info=info,
                vehicle_location=VehicleLocationMessage(**telemetry.to_wire()),
            ),
            EventFactory.create(
                EtaUpdated, snapshot, trip_info=info, timestamp_millis=snapshot.eta_millis
            ),
            EventFactory.create(
                RemainingDistanceUpdated,
                snapshot,
                trip_info=info,
                distance_meters=snapshot.remaining_distance_m,
            ),
        ]
        if include_waypoints:
            batch.append(
                EventFactory.create(
                    RemainingWaypointsUpdated,
                    snapshot,
                    trip_info=info,
                    waypoint_list=[waypoint_message(wp) for wp in snapshot.upcoming_waypoints],
                )
            )
        return batch
