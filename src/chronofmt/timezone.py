"""Time zone offset rendering.

Pure helpers turning an offset in seconds into the ISO 8601 and localized
GMT forms used by the ``O``, ``Z``, ``X``, ``x``, ``v``, ``z`` and ``V``
fields. Zone names themselves are not localized: generic and specific
non-location forms use the identifiers carried by the value.
"""

from __future__ import annotations

from chronofmt.locale_data import LocaleFormatTable


def split_offset(offset: int) -> tuple[str, int, int, int]:
    """Return ``(sign, hours, minutes, seconds)`` for an offset in seconds."""
    sign = "-" if offset < 0 else "+"
    total = abs(offset)
    return sign, total // 3600, (total % 3600) // 60, total % 60


def iso_offset(
    offset: int,
    extended: bool,
    minutes: str = "always",
    seconds: bool = False,
    z_for_zero: bool = False,
) -> str:
    """Format an offset as ISO 8601.

    Args:
        offset: Offset from UTC in seconds
        extended: Use ``:`` between hours and minutes
        minutes: "always", or "optional" to drop zero minutes
        seconds: Append non-zero seconds
        z_for_zero: Render a zero offset as ``Z``
    """
    if z_for_zero and offset == 0:
        return "Z"
    sign, hours, mins, secs = split_offset(offset)
    separator = ":" if extended else ""
    text = f"{sign}{hours:02d}"
    if minutes == "always" or mins or (seconds and secs):
        text += f"{separator}{mins:02d}"
    if seconds and secs:
        text += f"{separator}{secs:02d}"
    return text


def gmt_offset(offset: int, table: LocaleFormatTable, long: bool = True) -> str:
    """Format an offset with the locale's GMT templates.

    The long form pads hours to two digits ("GMT+01:00"); the short form
    strips the leading zero and drops zero minutes ("GMT+1").
    """
    if offset == 0:
        return table.gmt_zero_format

    positive, _, negative = table.hour_format.partition(";")
    template = negative if offset < 0 and negative else positive
    _, hours, mins, secs = split_offset(offset)

    if long:
        text = template.replace("HH", f"{hours:02d}").replace("mm", f"{mins:02d}")
        if secs:
            text += f":{secs:02d}"
    else:
        text = template.replace("HH", str(hours))
        if mins:
            text = text.replace("mm", f"{mins:02d}")
        else:
            text = _drop_minutes(text)

    return table.gmt_format.replace("{0}", text)


def _drop_minutes(text: str) -> str:
    index = text.find("mm")
    if index < 0:
        return text
    start = index
    while start > 0 and not text[start - 1].isdigit():
        start -= 1
    return text[:start] + text[index + 2:]


def exemplar_city(time_zone: str) -> str:
    """Derive a city name from a zone id ("America/New_York" -> "New York")."""
    return time_zone.rsplit("/", 1)[-1].replace("_", " ")
