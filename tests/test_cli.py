"""Tests for CLI entry point module."""

import argparse
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from order.cli import (
    create_parser,
    main,
    record_usage,
    run_calendar,
    run_math,
    run_ping,
    run_pong,
    run_random,
    run_usage,
    run_weather,
)
from order.config import get_settings
from order.exceptions import PingError, WeatherError
from order.types import PingResult


class TestCreateParser:
    """Tests for create_parser function."""

    def test_create_parser_returns_parser(self):
        """Test that create_parser returns an ArgumentParser."""
        assert isinstance(create_parser(), argparse.ArgumentParser)

    def test_parser_prog_name(self):
        """Test parser has correct program name."""
        assert create_parser().prog == "order"

    def test_version_exits(self):
        """Test --version causes SystemExit."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])

    def test_weather_city_words(self):
        """Test multi-word cities and the imperial flag."""
        args = create_parser().parse_args(["weather", "-i", "New", "York"])
        assert args.city == ["New", "York"]
        assert args.imperial is True
        assert args.command_name == "weather"

    def test_weather_defaults(self):
        args = create_parser().parse_args(["weather"])
        assert args.city == []
        assert args.imperial is False

    def test_ping_host_optional(self):
        assert create_parser().parse_args(["ping"]).host is None

    def test_pong_difficulty_optional_at_parse_time(self):
        """Test the difficulty is validated by the command, not argparse."""
        args = create_parser().parse_args(["pong"])
        assert args.difficulty is None
        assert args.usage.startswith("usage:")

    def test_random_bounds_are_ints(self):
        args = create_parser().parse_args(["random", "5", "10"])
        assert (args.min, args.max) == (5, 10)

    def test_random_bounds_must_be_ints(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["random", "five"])

    @pytest.mark.parametrize(
        "argv,name",
        [
            (["rev", "abc"], "reverse"),
            (["calc", "1+1"], "math"),
            (["cal"], "calendar"),
            (["rand"], "random"),
        ],
    )
    def test_aliases(self, argv, name):
        """Test aliases resolve to the canonical command."""
        assert create_parser().parse_args(argv).command_name == name

    def test_echo_requires_text(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["echo"])

    def test_verbose_flag(self):
        assert create_parser().parse_args(["-v", "hello"]).verbose is True


class TestRunWeather:
    """Tests for run_weather."""

    @pytest.fixture
    def args(self):
        return argparse.Namespace(city=[], imperial=False, verbose=False)

    @pytest.mark.asyncio
    async def test_default_city(self, args, capsys):
        """Test the configured default city is used."""
        current = MagicMock()
        with patch("order.weather.fetch_weather", new_callable=AsyncMock) as mock_fetch, patch(
            "order.weather.format_weather", return_value=["Weather for Los Angeles:"]
        ):
            mock_fetch.return_value = current
            result = await run_weather(args)

        assert result == 0
        assert mock_fetch.call_args[0][0] == "Los Angeles"
        out = capsys.readouterr().out
        assert out.startswith("Fetching weather information...")
        assert "Weather for Los Angeles:" in out

    @pytest.mark.asyncio
    async def test_joined_city(self, args):
        args.city = ["New", "York"]
        with patch("order.weather.fetch_weather", new_callable=AsyncMock) as mock_fetch, patch(
            "order.weather.format_weather", return_value=[]
        ):
            await run_weather(args)
        assert mock_fetch.call_args[0][0] == "New York"

    @pytest.mark.asyncio
    async def test_failure(self, args, capsys):
        """Test a fetch failure prints the message and exits 1."""
        with patch(
            "order.weather.fetch_weather",
            AsyncMock(side_effect=WeatherError("Failed to fetch weather data.")),
        ):
            result = await run_weather(args)
        assert result == 1
        assert "Failed to fetch weather data." in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_failure_verbose_traceback(self, args, capsys):
        """Test --verbose adds a traceback to weather failures."""
        args.verbose = True
        with patch(
            "order.weather.fetch_weather",
            AsyncMock(side_effect=WeatherError("Failed to fetch weather data.")),
        ):
            result = await run_weather(args)
        assert result == 1
        err = capsys.readouterr().err
        assert "Error: Failed to fetch weather data." in err
        assert "Traceback" in err


class TestRunPing:
    """Tests for run_ping."""

    @pytest.mark.asyncio
    async def test_default_host(self, capsys):
        args = argparse.Namespace(host=None, verbose=False)
        with patch("order.ping.ping", AsyncMock(return_value=PingResult("google.com", "9.1"))) as mock_ping:
            result = await run_ping(args)
        assert result == 0
        assert mock_ping.call_args[0][0] == "google.com"
        assert "PONG!" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_failure(self, capsys):
        args = argparse.Namespace(host="nope.invalid", verbose=False)
        with patch("order.ping.ping", AsyncMock(side_effect=PingError("Ping failed", stderr="unknown host"))):
            result = await run_ping(args)
        assert result == 1
        assert "Ping failed: unknown host" in capsys.readouterr().err


class TestRunPong:
    """Tests for run_pong."""

    @pytest.fixture
    def args(self):
        return argparse.Namespace(difficulty="easy", verbose=False, usage="usage: order pong [difficulty]\n")

    @pytest.mark.asyncio
    async def test_missing_difficulty(self, args, capsys):
        """Test a missing difficulty exits 2 with usage."""
        args.difficulty = None
        result = await run_pong(args)
        assert result == 2
        err = capsys.readouterr().err
        assert "missing difficulty" in err
        assert "usage: order pong" in err

    @pytest.mark.asyncio
    async def test_bad_difficulty(self, args, capsys):
        args.difficulty = "nightmare"
        assert await run_pong(args) == 2

    @pytest.mark.asyncio
    async def test_non_interactive(self, args, capsys):
        """Test the game refuses to run without a TTY."""
        with patch("order.terminal.Terminal.is_interactive", return_value=False):
            result = await run_pong(args)
        assert result == 1
        assert "interactive terminal" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_plays_and_finishes(self, args):
        """Test a completed game reaches the end-of-game prompt."""
        with patch("order.terminal.Terminal.is_interactive", return_value=True), patch(
            "order.pong.play", new_callable=AsyncMock
        ) as mock_play, patch("order.pong.finish_game") as mock_finish:
            result = await run_pong(args)

        assert result == 0
        engine, terminal = mock_play.call_args[0][:2]
        assert engine.win_score == 5
        assert engine.state.difficulty.value == "easy"
        mock_finish.assert_called_once_with(engine, terminal)


class TestSimpleCommands:
    """Tests for random, math, calendar and usage handlers."""

    @pytest.mark.asyncio
    async def test_random_defaults(self, capsys):
        args = argparse.Namespace(min=None, max=None, verbose=False, usage="")
        assert await run_random(args) == 0
        assert 1 <= int(capsys.readouterr().out) <= 100

    @pytest.mark.asyncio
    async def test_random_inverted(self, capsys):
        args = argparse.Namespace(min=9, max=1, verbose=False, usage="usage: order random [min] [max]\n")
        assert await run_random(args) == 2
        assert "must not be greater" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_math(self, capsys):
        args = argparse.Namespace(expression=["2", "+", "2"], verbose=False)
        assert await run_math(args) == 0
        assert capsys.readouterr().out == "4\n"

    @pytest.mark.asyncio
    async def test_math_error(self, capsys):
        args = argparse.Namespace(expression=["1/0"], verbose=False)
        assert await run_math(args) == 1
        assert "Division by zero" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_calendar_bad_month(self, capsys):
        args = argparse.Namespace(month=13, year=None, verbose=False, usage="usage: order calendar\n")
        assert await run_calendar(args) == 2

    @pytest.mark.asyncio
    async def test_calendar(self, capsys):
        args = argparse.Namespace(month=2, year=2026, verbose=False, usage="")
        assert await run_calendar(args) == 0
        assert "February 2026" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_usage_listing_and_reset(self, capsys):
        record_usage("weather")
        record_usage("weather")
        assert await run_usage(argparse.Namespace(reset=False, verbose=False)) == 0
        assert "weather" in capsys.readouterr().out

        assert await run_usage(argparse.Namespace(reset=True, verbose=False)) == 0
        assert await run_usage(argparse.Namespace(reset=False, verbose=False)) == 0
        assert "No usage recorded yet." in capsys.readouterr().out


class TestRecordUsage:
    """Tests for record_usage."""

    def test_records_command(self):
        record_usage("ping")
        data = json.loads(get_settings().usage_file.read_text())
        assert data == {"ping": 1}

    def test_usage_command_not_counted(self):
        record_usage("usage")
        assert not get_settings().usage_file.exists()

    def test_disabled(self, monkeypatch):
        monkeypatch.setenv("ORDER_TRACK_USAGE", "false")
        get_settings.cache_clear()
        record_usage("ping")
        assert not get_settings().usage_file.exists()

    def test_failure_is_not_fatal(self):
        """Test a broken counter file never fails the command."""
        path = get_settings().usage_file
        path.parent.mkdir(parents=True)
        path.write_text("{broken")
        record_usage("ping")
        assert path.read_text() == "{broken"


class TestMain:
    """Tests for main."""

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "usage: order" in capsys.readouterr().out

    def test_hello(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["hello", "Ada"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out == "Hello, Ada!\n"

    def test_reverse_counts_usage(self, capsys):
        """Test a command run is recorded in the usage file."""
        with pytest.raises(SystemExit):
            main(["reverse", "abc"])
        assert capsys.readouterr().out == "cba\n"
        assert json.loads(get_settings().usage_file.read_text()) == {"reverse": 1}

    def test_math_result_too_large(self, capsys):
        """Test an unprintable result is an error, not a traceback."""
        with pytest.raises(SystemExit) as exc_info:
            main(["math", "9**5000"])
        assert exc_info.value.code == 1
        assert "Result too large" in capsys.readouterr().err

    def test_pong_usage_error_exit_status(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["pong"])
        assert exc_info.value.code == 2

    def test_keyboard_interrupt(self, capsys):
        """Test Ctrl-C outside the game exits 130."""
        with patch("order.cli.asyncio.run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main(["clock"])
        assert exc_info.value.code == 130
        assert "Interrupted" in capsys.readouterr().err
