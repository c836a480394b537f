"""
CLI Entry Point - Command-line interface for order.

Provides subcommands for weather, ping, text toys, the terminal pong
game, a live clock, a calculator, a calendar, and device/usage
introspection.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date
from typing import Awaitable, Callable, NoReturn

import structlog

from order import __version__
from order.config import configure_logging, get_settings
from order.exceptions import OrderError, TerminalNotInteractiveError, UsageError, UsageStoreError

logger = structlog.get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="order",
        description="Order CLI for various commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"order {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _add_weather_parser(subparsers)
    _add_ping_parser(subparsers)
    _add_text_parsers(subparsers)
    _add_pong_parser(subparsers)
    _add_random_parser(subparsers)
    _add_clock_parser(subparsers)
    _add_math_parser(subparsers)
    _add_calendar_parser(subparsers)
    _add_introspection_parsers(subparsers)

    return parser


def _add_weather_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add weather subcommand parser."""
    weather_parser = subparsers.add_parser(
        "weather",
        help="Get the weather information (default: Los Angeles)",
        description="Show current conditions from wttr.in",
        epilog="""
Examples:
  order weather
  order weather New York
  order weather -i Chicago
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    weather_parser.set_defaults(command_name="weather")

    weather_parser.add_argument(
        "city",
        nargs="*",
        help="City name (may be several words)",
    )

    weather_parser.add_argument(
        "-i",
        "--imperial",
        action="store_true",
        help="Use imperial units (Fahrenheit, mph)",
    )


def _add_ping_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add ping subcommand parser."""
    ping_parser = subparsers.add_parser(
        "ping",
        help="Ping a website and print the response time (default: google.com)",
    )
    ping_parser.set_defaults(command_name="ping")

    ping_parser.add_argument(
        "host",
        nargs="?",
        default=None,
        help="Host to ping",
    )


def _add_text_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Add hello, echo and reverse subcommand parsers."""
    hello_parser = subparsers.add_parser(
        "hello",
        help="Greets the user by name (default: World)",
    )
    hello_parser.set_defaults(command_name="hello")
    hello_parser.add_argument("name", nargs="?", help="Name to greet")

    echo_parser = subparsers.add_parser(
        "echo",
        help="Print the given text",
    )
    echo_parser.set_defaults(command_name="echo")
    echo_parser.add_argument("text", nargs="+", help="Text to print")

    reverse_parser = subparsers.add_parser(
        "reverse",
        aliases=["rev"],
        help="Print the given text reversed",
    )
    reverse_parser.set_defaults(command_name="reverse")
    reverse_parser.add_argument("text", nargs="+", help="Text to reverse")


def _add_pong_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add pong subcommand parser."""
    pong_parser = subparsers.add_parser(
        "pong",
        help="Play pong against a bot in the terminal",
        description="Arrow keys (or w/s) move your paddle, q quits. First to 5 wins.",
    )
    pong_parser.add_argument(
        "difficulty",
        nargs="?",
        default=None,
        help="Bot difficulty: easy, medium, hard or impossible",
    )
    pong_parser.set_defaults(command_name="pong", usage=pong_parser.format_usage())


def _add_random_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add random subcommand parser."""
    random_parser = subparsers.add_parser(
        "random",
        aliases=["rand"],
        help="Print a random integer (default range: 1-100)",
    )
    random_parser.add_argument("min", nargs="?", type=int, default=None, help="Lower bound (inclusive)")
    random_parser.add_argument("max", nargs="?", type=int, default=None, help="Upper bound (inclusive)")
    random_parser.set_defaults(command_name="random", usage=random_parser.format_usage())


def _add_clock_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add clock subcommand parser."""
    clock_parser = subparsers.add_parser(
        "clock",
        help="Show a live clock (Ctrl-C to stop)",
    )
    clock_parser.set_defaults(command_name="clock")
    clock_parser.add_argument(
        "--once",
        action="store_true",
        help="Print the current time once and exit",
    )


def _add_math_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add math subcommand parser."""
    math_parser = subparsers.add_parser(
        "math",
        aliases=["calc"],
        help="Evaluate a math expression",
        epilog="""
Examples:
  order math "2 + 2 * 3"
  order math "sqrt(16) + 2^3"
  order calc "sin(pi / 2)"
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    math_parser.set_defaults(command_name="math")
    math_parser.add_argument("expression", nargs="+", help="Expression to evaluate")


def _add_calendar_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add calendar subcommand parser."""
    calendar_parser = subparsers.add_parser(
        "calendar",
        aliases=["cal"],
        help="Show a month calendar (default: current month)",
    )
    calendar_parser.add_argument("month", nargs="?", type=int, default=None, help="Month (1-12)")
    calendar_parser.add_argument("year", nargs="?", type=int, default=None, help="Year")
    calendar_parser.set_defaults(command_name="calendar", usage=calendar_parser.format_usage())


def _add_introspection_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Add device and usage subcommand parsers."""
    device_parser = subparsers.add_parser(
        "device",
        help="Show information about this device",
    )
    device_parser.set_defaults(command_name="device")

    usage_parser = subparsers.add_parser(
        "usage",
        help="Show how often each command has been run",
    )
    usage_parser.set_defaults(command_name="usage")
    usage_parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear all usage counters",
    )


def _report(error: Exception, args: argparse.Namespace) -> None:
    """Print an error to stderr, with traceback in verbose mode."""
    print(f"Error: {error}", file=sys.stderr)
    if isinstance(error, UsageError) and getattr(args, "usage", None):
        print(args.usage, end="", file=sys.stderr)
    if getattr(args, "verbose", False):
        import traceback

        traceback.print_exc()


async def run_weather(args: argparse.Namespace) -> int:
    """Execute weather command."""
    from order.weather import fetch_weather, format_weather

    settings = get_settings()
    city = " ".join(args.city) if args.city else settings.default_city

    print("Fetching weather information...")
    try:
        current = await fetch_weather(city, settings=settings)
    except OrderError as e:
        _report(e, args)
        return e.exit_code

    for line in format_weather(city, current, imperial=args.imperial):
        print(line)
    return 0


async def run_ping(args: argparse.Namespace) -> int:
    """Execute ping command."""
    from order.ping import format_pong, ping

    settings = get_settings()
    host = args.host or settings.default_host

    try:
        result = await ping(host, timeout=settings.ping_timeout)
    except OrderError as e:
        _report(e, args)
        return e.exit_code

    print(format_pong(result, color=sys.stdout.isatty()))
    return 0


async def run_hello(args: argparse.Namespace) -> int:
    """Execute hello command."""
    from order.novelty import greet

    print(greet(args.name))
    return 0


async def run_echo(args: argparse.Namespace) -> int:
    """Execute echo command."""
    from order.novelty import echo_text

    print(echo_text(args.text))
    return 0


async def run_reverse(args: argparse.Namespace) -> int:
    """Execute reverse command."""
    from order.novelty import reverse_text

    print(reverse_text(args.text))
    return 0


async def run_pong(args: argparse.Namespace) -> int:
    """Execute pong command."""
    from order.pong import PongEngine, finish_game, parse_difficulty, play
    from order.terminal import Terminal

    settings = get_settings()
    terminal = Terminal()

    try:
        difficulty = parse_difficulty(args.difficulty)
        if not terminal.is_interactive():
            raise TerminalNotInteractiveError(
                "Pong needs an interactive terminal (stdin and stdout must be a TTY)"
            )
        engine = PongEngine(
            difficulty,
            width=settings.pong_width,
            height=settings.pong_height,
            win_score=settings.pong_win_score,
        )
        await play(engine, terminal)
    except OrderError as e:
        _report(e, args)
        return e.exit_code

    await asyncio.to_thread(finish_game, engine, terminal)
    return 0


async def run_random(args: argparse.Namespace) -> int:
    """Execute random command."""
    from order.novelty import random_integer

    settings = get_settings()
    low = settings.random_min if args.min is None else args.min
    high = settings.random_max if args.max is None else args.max

    try:
        print(random_integer(low, high))
    except UsageError as e:
        _report(e, args)
        return e.exit_code
    return 0


async def run_clock(args: argparse.Namespace) -> int:
    """Execute clock command."""
    from order.clock import run_clock as clock

    await clock(once=args.once)
    return 0


async def run_math(args: argparse.Namespace) -> int:
    """Execute math command."""
    from order.calc import evaluate, format_number

    expression = " ".join(args.expression)
    try:
        result = evaluate(expression)
    except OrderError as e:
        _report(e, args)
        return e.exit_code

    print(format_number(result))
    return 0


async def run_calendar(args: argparse.Namespace) -> int:
    """Execute calendar command."""
    from order.calendar_view import render_month, resolve_month

    today = date.today()
    try:
        month, year = resolve_month(args.month, args.year, today)
    except UsageError as e:
        _report(e, args)
        return e.exit_code

    print(render_month(year, month, today=today, highlight=sys.stdout.isatty()), end="")
    return 0


async def run_device(args: argparse.Namespace) -> int:
    """Execute device command."""
    from order.device import collect_device_info, format_device_info

    for line in format_device_info(collect_device_info()):
        print(line)
    return 0


async def run_usage(args: argparse.Namespace) -> int:
    """Execute usage command."""
    from order.usage import UsageStore, format_usage

    store = UsageStore(get_settings().usage_file)
    try:
        if args.reset:
            store.reset()
            print("Usage counters cleared.")
            return 0
        counts = store.load()
    except OrderError as e:
        _report(e, args)
        return e.exit_code

    for line in format_usage(counts):
        print(line)
    return 0


HANDLERS: dict[str, Callable[[argparse.Namespace], Awaitable[int]]] = {
    "weather": run_weather,
    "ping": run_ping,
    "hello": run_hello,
    "echo": run_echo,
    "reverse": run_reverse,
    "pong": run_pong,
    "random": run_random,
    "clock": run_clock,
    "math": run_math,
    "calendar": run_calendar,
    "device": run_device,
    "usage": run_usage,
}


def record_usage(command: str) -> None:
    """Count an invocation; failures are logged and never fatal."""
    from order.usage import UsageStore

    settings = get_settings()
    if not settings.track_usage or command == "usage":
        return
    try:
        count = UsageStore(settings.usage_file).record(command)
    except UsageStoreError as e:
        logger.warning("usage_record_failed", command=command, error=str(e))
        return
    logger.debug("usage_recorded", command=command, count=count)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)

    command = getattr(args, "command_name", None)
    if command is None:
        parser.print_help()
        sys.exit(0)

    record_usage(command)

    try:
        exit_code = asyncio.run(HANDLERS[command](args))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
