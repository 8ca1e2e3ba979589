"""Terminal countdown timer.

Usage::

    cybernaut-timer <seconds>

Renders the remaining time as MM:SS once per second, overwriting the
same terminal line, and prints a finished message when it runs out.
"""

import argparse
import asyncio
import math
import sys
from typing import Awaitable, Callable, List, Optional, TextIO, Union

import structlog

from .exceptions import TimerInputError
from .logging_config import setup_logging

logger = structlog.get_logger("cybernaut.timer")

PROG = "cybernaut-timer"
USAGE = f"Usage: {PROG} <seconds>"
EXAMPLE = f"Example: {PROG} 60  (for a 1-minute timer)"


def parse_duration(raw: Union[str, int, float]) -> int:
    """Validate a duration and return it as whole seconds.

    Raises:
        TimerInputError: Not numeric, not finite, or not positive.
    """
    if isinstance(raw, bool):
        raise TimerInputError("duration must be a number", value=raw)
    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            raise TimerInputError(f"not a number: {raw!r}", value=raw) from None
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        raise TimerInputError("duration must be a number", value=raw)

    if not math.isfinite(value) or value <= 0:
        raise TimerInputError(f"duration must be a positive number, got {raw!r}", value=raw)
    return math.floor(value)


def format_remaining(seconds: int) -> str:
    """Format whole seconds as zero-padded MM:SS."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class CountdownTimer:
    """One-shot countdown rendered in place on a text stream.

    The first tick happens one interval after start. Each tick renders
    the current remaining value and then decrements it; the tick that
    takes it below zero renders the finished message and ends the run.

    Args:
        duration: Seconds to count down (validated by parse_duration).
        stream: Output stream (default sys.stdout).
        sleep: Awaitable sleep function, injectable for tests.
        interval: Seconds between ticks.
    """

    def __init__(
        self,
        duration: Union[str, int, float],
        stream: Optional[TextIO] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        interval: float = 1.0,
    ):
        self.remaining = parse_duration(duration)
        self.duration = self.remaining
        self.stream = stream if stream is not None else sys.stdout
        self.interval = interval
        self._sleep = sleep
        self.finished = False

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def tick(self) -> bool:
        """Render the current value and decrement. Returns True when done."""
        if self.finished:
            raise RuntimeError("Timer already finished")
        self._write(f"\rTime remaining: {format_remaining(self.remaining)}   ")
        self.remaining -= 1
        if self.remaining < 0:
            self.finished = True
            self._write("\rTimer finished!             \n")
            logger.debug("timer_finished", duration=self.duration)
            return True
        return False

    async def run(self) -> None:
        """Count down to zero, one tick per interval."""
        self._write(f"Timer started for {self.remaining} seconds.\n")
        logger.debug("timer_started", duration=self.duration)
        while not self.finished:
            await self._sleep(self.interval)
            self.tick()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Count down the given number of seconds in the terminal.",
        epilog=EXAMPLE,
    )
    parser.add_argument("seconds", nargs="?", help="Duration in seconds (positive number)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging()  # console only, no log files

    if args.seconds is None:
        print(USAGE)
        print(EXAMPLE)
        return 0

    try:
        timer = CountdownTimer(args.seconds)
    except TimerInputError:
        print(
            "Error: Please provide a positive number for the duration in seconds.",
            file=sys.stderr,
        )
        print(USAGE, file=sys.stderr)
        return 2

    try:
        asyncio.run(timer.run())
    except KeyboardInterrupt:
        print()
        return 130
    return 0


def run():
    """Synchronous entry point for the ``cybernaut-timer`` console script."""
    sys.exit(main())


if __name__ == "__main__":
    run()
