"""
ExpireCommand — Expire an Identifier or one of its Attributes

The expiration instant is read interactively as a date (YYYYMMDD) and a
time (HHMMSS, 24-hour), interpreted in local time.

Validation is by length and digits only. Out-of-range fields roll over
the way a lenient calendar does (20230230 is March 2nd, month 13 is
January of the next year); the request is still sent, with a note
showing the normalized instant.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from . import Keyword
from ..commands.base import BaseCommand
from ..core.errors import UsageError
from ..presentation.formatters import format_timestamp


KEYWORD = Keyword.EXPIRE
USAGE = "expire ID [ATTR]"

DATE_FORMAT = "YYYYMMDD"
TIME_FORMAT = "HHMMSS"


def parse_expiration(date_text: str, time_text: str) -> Tuple[int, Optional[str]]:
    """
    Combine date and time text into epoch milliseconds.

    Args:
        date_text: Exactly 8 digits, YYYYMMDD
        time_text: Exactly 6 digits, HHMMSS

    Returns:
        (epoch_ms, note) where note describes a calendar rollover, or None

    Raises:
        UsageError: If either part has the wrong length or non-digits
    """
    date_text = (date_text or "").strip()
    time_text = (time_text or "").strip()
    if len(date_text) != len(DATE_FORMAT) or not date_text.isdigit():
        raise UsageError(f"Date must be exactly 8 digits ({DATE_FORMAT}), got \"{date_text}\".")
    if len(time_text) != len(TIME_FORMAT) or not time_text.isdigit():
        raise UsageError(f"Time must be exactly 6 digits ({TIME_FORMAT}), got \"{time_text}\".")

    year, month, day = int(date_text[:4]), int(date_text[4:6]), int(date_text[6:8])
    hour, minute, second = int(time_text[:2]), int(time_text[2:4]), int(time_text[4:6])

    try:
        moment = datetime(year + (month - 1) // 12, (month - 1) % 12 + 1, 1) + timedelta(
            days=day - 1, hours=hour, minutes=minute, seconds=second
        )
        epoch_ms = int(moment.timestamp() * 1000)
    except (ValueError, OverflowError, OSError) as e:
        raise UsageError(f"Cannot represent {date_text} {time_text} as a time: {e}") from e

    note = None
    if (moment.year, moment.month, moment.day, moment.hour, moment.minute, moment.second) != (
            year, month, day, hour, minute, second):
        note = f"Note: {date_text} {time_text} is not a calendar time; using {format_timestamp(epoch_ms)}."
    return epoch_ms, note


class ExpireCommand(BaseCommand):

    USAGE = USAGE

    def expire(self, args: List[str]):
        """
        Raises:
            UsageError: Wrong argument count, read-only session, bad date/time
            LinkError: World model rejected the expiration
        """
        self.require_args(args, 1, 2)
        identifier = args[0]
        attribute = args[1] if len(args) == 2 else None
        mutation = self.mutation

        date_text = self.console.ask(f"Expiration date ({DATE_FORMAT}): ")
        if date_text is None:
            raise UsageError("No expiration date entered.")
        time_text = self.console.ask(f"Expiration time ({TIME_FORMAT}): ")
        if time_text is None:
            raise UsageError("No expiration time entered.")

        expires, note = parse_expiration(date_text, time_text)
        if note:
            self.write(note)

        target = f"\"{attribute}\" of \"{identifier}\"" if attribute else f"\"{identifier}\""
        self.check_sent(mutation.expire(identifier, expires, attribute), f"expiration of {target}")
        self.write(f"Expired {target} at {format_timestamp(expires)}.")


def handle(cli, args):
    """Handle expire command dispatch."""
    cli._expire_cmd.expire(args)
