import os
import re
import subprocess
import dateparser
import pendulum
from datetime import datetime, date, time

from pathlib import Path

RELATIVE_DAYS = {"today", "tomorrow", "yesterday"}
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def edit_file(path: Path) -> bool:
    """
    Open a file in the user's preferred editor and check if it was modified.
    If the file was modified, return True. Otherwise, return False.
    """
    editor = os.getenv("EDITOR", "vim") # Default to vim if $EDITOR is not set

    pre_edit = path.read_text()

    subprocess.run([editor, str(path)], check=True)

    post_edit = path.read_text()

    # vim adds a trailing newline on save; only report semantic changes.
    return pre_edit.strip() != post_edit.strip()


def resolve_natural_date(today: date, arg: str) -> date:
    """
    Parse a natural-language date string and return a datetime.date.
    Examples: "today", "yesterday", "2025-08-03".
    """
    if arg.strip().lower() == "today":
        return today

    dt = dateparser.parse(
        arg,
        settings={
            "RELATIVE_BASE": datetime.combine(today, time.min),
            "RETURN_AS_TIMEZONE_AWARE": False,
        },
    )
    if dt is None:
        raise ValueError(f"Invalid date string: {arg}")

    return dt.date()


def resolve_day_label(today: date, arg: str) -> str:
    """
    Turn "today", "tomorrow", "yesterday" or an ISO date into a weekday name.
    Anything else is already a day label and is returned untouched, so
    "Mon" stays "Mon".
    """
    candidate = arg.strip()
    if candidate.lower() in RELATIVE_DAYS or ISO_DATE.match(candidate):
        resolved = resolve_natural_date(today, candidate)
        return pendulum.date(resolved.year, resolved.month, resolved.day).format("dddd")
    return arg
