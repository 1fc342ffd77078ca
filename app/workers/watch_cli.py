from __future__ import annotations

import argparse
import logging
import sys

from app.config import load_config, setup_logging
from app.constants import Periods
from app.domain.exceptions import SipekaError
from app.domain.sensor_reading import SensorReading
from app.domain.water_quality import evaluate_reading
from app.services.container import ServiceContainer
from app.utils.polling import PollingTask, poll_interval_for
from app.utils.time import set_display_timezone

logger = logging.getLogger(__name__)

_PERIOD_MINUTES = [minutes for _label, minutes in Periods.OPTIONS]


def format_reading(reading: SensorReading) -> str:
    evaluation = evaluate_reading(reading)
    return (
        f"{reading.date_formatted}  "
        f"Suhu {reading.temperature:.2f}°C  pH {reading.ph_level:.2f}  Amonia {reading.ammonia:.2f} ppm  "
        f"{evaluation.display.emoji} {evaluation.overall.value}"
    )


class ReadingPrinter:
    """Prints readings newer than the last one shown."""

    def __init__(self, stream=None) -> None:
        self._stream = stream or sys.stdout
        self._last_key: str | None = None

    def __call__(self, readings: list[SensorReading]) -> None:
        fresh = readings
        if self._last_key is not None:
            fresh = [r for r in readings if r.record_key > self._last_key]
        for reading in fresh:
            print(format_reading(reading), file=self._stream)
        if readings:
            self._last_key = max(self._last_key or "", readings[-1].record_key)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sipeka-watch", description="Watch a device's water quality readings")
    parser.add_argument("--user", required=True, help="Owner uid")
    parser.add_argument("--token", required=True, help="Device token")
    parser.add_argument(
        "--minutes",
        type=int,
        choices=_PERIOD_MINUTES,
        default=Periods.DEFAULT_MINUTES,
        help="Time window; 1/5/60-minute windows refresh automatically",
    )
    parser.add_argument("--once", action="store_true", help="Print the window once and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config()
    setup_logging(debug=config.DEBUG, level=config.log_level)
    set_display_timezone(config.display_timezone)
    container = ServiceContainer.build(config)
    service = container.sensor_data_service

    def fetch() -> list[SensorReading]:
        return service.fetch_latest(args.user, args.token, args.minutes)

    printer = ReadingPrinter()
    interval = poll_interval_for(args.minutes)
    try:
        if args.once or interval is None:
            printer(fetch())
            return 0

        def on_error(exc: Exception) -> None:
            logger.error("Polling failed: %s", exc)

        task = PollingTask(fetch, printer, interval, on_error=on_error, name="SipekaWatch")
        # Surface ownership/store errors before entering the loop
        task.run_once()
        task.start()
        logger.info("Watching %s every %ss (press Ctrl+C to stop)", args.token, interval)
        try:
            task.wait()
        except KeyboardInterrupt:
            logger.info("Stopping watcher...")
        finally:
            task.stop()
        return 0
    except SipekaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    finally:
        container.shutdown()


if __name__ == "__main__":
    sys.exit(main())
