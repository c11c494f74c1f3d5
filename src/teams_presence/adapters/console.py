from __future__ import annotations

import sys
from typing import Optional, TextIO

from teams_presence.domain.models import PresenceRecord

HEADER = ("Object ID", "Availability", "Activity", "Out of Office")

BANNER = r"""
  _______                         ______
 |__   __|                       |  ____|
    | | ___  __ _ _ __ ___  ___  | |__   _ __  _   _ _ __ ___
    | |/ _ \/ _` | '_ ` _ \/ __| |  __| | '_ \| | | | '_ ` _ \
    | |  __/ (_| | | | | | \__ \ | |____| | | | |_| | | | | | |
    |_|\___|\__,_|_| |_| |_|___/ |______|_| |_|\__,_|_| |_| |_|"""


def format_flag(value: bool) -> str:
    return "true" if value else "false"


def format_row(identifier: str, availability: str, activity: str, out_of_office: str) -> str:
    return f"{identifier:<40} {availability:<15} {activity:<15} {out_of_office:<5}"


def format_presence_line(record: PresenceRecord) -> str:
    return format_row(
        record.identifier,
        record.availability,
        record.activity,
        format_flag(record.out_of_office),
    )


class ConsolePresenceSink:
    """Prints a column-aligned table of presence records."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def write_banner(self) -> None:
        print(BANNER, file=self.stream)

    def write_header(self) -> None:
        print(format_row(*HEADER), file=self.stream)

    def write(self, record: PresenceRecord) -> None:
        print(format_presence_line(record), file=self.stream)
