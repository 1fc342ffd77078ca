import io
from unittest.mock import MagicMock, patch

import pytest

from app.domain.exceptions import AccessDeniedError
from app.domain.sensor_reading import SensorReading
from app.workers import watch_cli
from app.workers.watch_cli import ReadingPrinter, build_parser, format_reading

TS = 1_792_393_509_000


def _reading(key, ph=7.2):
    return SensorReading(key, TS, 27.0, ph, 0.1)


def test_format_reading_includes_status():
    line = format_reading(_reading("a", ph=4.0))
    assert line.startswith("19/10/2026 14.05.09")
    assert "pH 4.00" in line
    assert line.endswith("Bahaya")


def test_printer_only_prints_new_readings():
    out = io.StringIO()
    printer = ReadingPrinter(out)
    printer([_reading("001"), _reading("002")])
    printer([_reading("002"), _reading("003")])
    assert len(out.getvalue().splitlines()) == 3


def test_parser_restricts_minutes_to_known_windows():
    args = build_parser().parse_args(["--user", "u1", "--token", "t"])
    assert args.minutes == 5
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--user", "u1", "--token", "t", "--minutes", "7"])


@pytest.fixture()
def container():
    container = MagicMock()
    container.sensor_data_service.fetch_latest.return_value = [_reading("001")]
    with patch.object(watch_cli.ServiceContainer, "build", return_value=container), patch.object(
        watch_cli, "setup_logging"
    ):
        yield container


def test_main_once_prints_and_shuts_down(container, capsys):
    assert watch_cli.main(["--user", "u1", "--token", "t", "--once"]) == 0
    container.sensor_data_service.fetch_latest.assert_called_once_with("u1", "t", 5)
    assert "Aman" in capsys.readouterr().out
    container.shutdown.assert_called_once()


def test_main_reports_access_denied(container, capsys):
    container.sensor_data_service.fetch_latest.side_effect = AccessDeniedError("Access denied")
    assert watch_cli.main(["--user", "u1", "--token", "t", "--once"]) == 2
    assert "Access denied" in capsys.readouterr().err
    container.shutdown.assert_called_once()


def test_main_polls_until_interrupted(container):
    with patch.object(watch_cli.PollingTask, "wait", side_effect=KeyboardInterrupt), patch.object(
        watch_cli.PollingTask, "start"
    ) as start, patch.object(watch_cli.PollingTask, "stop") as stop:
        assert watch_cli.main(["--user", "u1", "--token", "t", "--minutes", "1"]) == 0
    start.assert_called_once()
    stop.assert_called_once()
    container.shutdown.assert_called_once()
