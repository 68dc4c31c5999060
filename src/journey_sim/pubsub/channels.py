"""Event names published to journey-sharing subscribers.

Names match the listener callbacks journey-sharing clients register.
"""

ON_TRIP_STATUS_UPDATED = "onTripStatusUpdated"
ON_TRIP_VEHICLE_LOCATION_UPDATED = "onTripVehicleLocationUpdated"
ON_TRIP_ETA_UPDATED = "onTripETAToNextWaypointUpdated"
ON_TRIP_REMAINING_DISTANCE_UPDATED = "onTripActiveRouteRemainingDistanceUpdated"
ON_TRIP_REMAINING_WAYPOINTS_UPDATED = "onTripRemainingWaypointsUpdated"

# Published after every tick, in this order
TICK_EVENTS = (
    ON_TRIP_STATUS_UPDATED,
    ON_TRIP_VEHICLE_LOCATION_UPDATED,
    ON_TRIP_ETA_UPDATED,
    ON_TRIP_REMAINING_DISTANCE_UPDATED,
)

ALL_EVENTS = (*TICK_EVENTS, ON_TRIP_REMAINING_WAYPOINTS_UPDATED)
