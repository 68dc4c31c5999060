"""Command-line entry point.

    journey-sim run trip.json --duration 60
    journey-sim replay trip.json --max-ticks 200

Feed events are written to stdout as JSON lines; logs go to stderr.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
import threading
import time
from pathlib import Path
from typing import Any, TextIO

from pydantic import ValidationError

from journey_sim.controller import JourneySharingController
from journey_sim.core.exceptions import ConfigurationError, JourneySharingError
from journey_sim.engine.replay import replay_trip
from journey_sim.events.schemas import JourneyEvent
from journey_sim.settings import Settings, SimulationSettings, get_settings
from journey_sim.sim_logging import setup_logging
from journey_sim.trips.payload import parse_trip_data

logger = logging.getLogger(__name__)


class JsonLinesSink:
    """Writes each event as one JSON object per line."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self.count = 0

    def __call__(self, event: JourneyEvent) -> None:
        trip_info, payload = event.callback_args()
        line = json.dumps({"event": event.event_name, "tripInfo": trip_info, "payload": payload})
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
            self.count += 1


def load_trip_payload(path: Path) -> dict[str, Any]:
    with path.open() as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return payload


async def run_live(
    payload: dict[str, Any], settings: Settings, duration: float | None, sink: JsonLinesSink
) -> int:
    controller = JourneySharingController(
        settings=settings.simulation, provider=settings.provider
    )
    controller.add_listener(sink)
    await controller.start_journey_sharing(payload)

    started = time.monotonic()
    poll = min(settings.simulation.tick_interval_seconds, 0.5)
    try:
        while duration is None or time.monotonic() - started < duration:
            snapshot = controller.active_snapshot()
            if snapshot is None or snapshot.is_terminal:
                # Let the terminal batch go out before tearing down
                await asyncio.sleep(poll)
                break
            await asyncio.sleep(poll)
    finally:
        await controller.cleanup()

    logger.info("Published %d events", sink.count)
    return 0


def run_replay(
    payload: dict[str, Any], settings: Settings, max_ticks: int, keep_going: bool, sink: JsonLinesSink
) -> int:
    trip = parse_trip_data(payload)
    result = replay_trip(
        trip,
        sink,
        max_ticks=max_ticks,
        settings=settings.simulation,
        stop_on_terminal=not keep_going,
    )
    logger.info(
        "Replayed %d ticks (%d failed, %d undelivered events), final status %s",
        result.ticks,
        result.failed_ticks,
        result.failed_deliveries,
        result.final.status.name,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="journey-sim", description="Simulated journey-sharing trip feed"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Tick a trip in real time")
    run.add_argument("trip", type=Path, help="Trip JSON (tripName, tripStatus, remainingWaypoints...)")
    run.add_argument("--duration", type=float, default=None, help="Seconds to run (default: until terminal)")
    run.add_argument("--interval", type=float, default=None, help="Override tick interval in seconds")

    replay = sub.add_parser("replay", help="Replay a trip on a virtual clock")
    replay.add_argument("trip", type=Path)
    replay.add_argument("--max-ticks", type=int, default=1000)
    replay.add_argument(
        "--keep-going", action="store_true", help="Keep ticking after the trip completes"
    )

    for p in (run, replay):
        p.add_argument("--waypoint-updates", action="store_true", help="Publish waypoint list changes")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides applied.

    Raises:
        ConfigurationError: a setting is missing or out of range.
    """
    overrides: dict[str, Any] = {}
    if getattr(args, "interval", None) is not None:
        overrides["tick_interval_seconds"] = args.interval
    if args.waypoint_updates:
        overrides["publish_waypoint_updates"] = True

    try:
        settings = get_settings()
        if overrides:
            simulation = SimulationSettings.model_validate(
                {**settings.simulation.model_dump(), **overrides}
            )
            settings = settings.model_copy(update={"simulation": simulation})
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid settings: {', '.join(fields)}", details={"fields": fields}
        ) from e
    return settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    environment = os.environ.get("ENVIRONMENT", "development")

    try:
        settings = load_settings(args)
    except ConfigurationError as e:
        setup_logging(environment=environment)
        logger.error(e.message, extra={"error_code": "CONFIGURATION"})
        return 1

    log_format = os.environ.get("LOG_FORMAT") or settings.simulation.log_format
    setup_logging(
        level=settings.simulation.log_level,
        json_output=log_format == "json",
        environment=environment,
    )

    sink = JsonLinesSink(sys.stdout)
    try:
        payload = load_trip_payload(args.trip)
        if args.command == "run":
            return asyncio.run(run_live(payload, settings, args.duration, sink))
        return run_replay(payload, settings, args.max_ticks, args.keep_going, sink)
    except JourneySharingError as e:
        logger.error(f"{e.code.value}: {e.message}")
        return 2
    except (OSError, ValueError) as e:
        logger.error(f"Could not load trip: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
