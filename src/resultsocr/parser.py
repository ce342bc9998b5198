"""Turn raw OCR text into table rows."""

from __future__ import annotations

import logging
import re
from typing import Iterator, NamedTuple

from .cleaner import clean_driver_name, match_team, normalize_position
from .tables import KNOWN_TEAMS, STANDINGS_NUMERIC_COLUMNS, TableType, empty_row

logger = logging.getLogger(__name__)

# Column captions re-captured by OCR.
_HEADER_LINE_RE = re.compile(
    r"^(pos|position|#|driver|team|constructor|name|result)", re.IGNORECASE
)
_POSITION_RE = re.compile(r"^([0-9]{1,2})\b", re.ASCII)

_TIME_OR_GAP_RE = re.compile(
    r"\+[0-9]+[.,:][0-9]+|[0-9]{1,2}:[0-9]{2}[.,:][0-9]{2,3}|DNF|DSQ|DNS",
    re.IGNORECASE,
)
_BEST_LAP_RE = re.compile(r"\b[0-9]:[0-9]{2}\.[0-9]{2,3}\b", re.ASCII)
_POINTS_RE = re.compile(r"\b[0-9]{1,3}\b", re.ASCII)
_INTEGER_RE = re.compile(r"\b[0-9]+\b", re.ASCII)
_TEAM_LETTER_GAP = "[^A-Za-z]*"

STATUS_MARKERS = ("DNF", "DSQ", "DNS")
FINISHED = "Finished"


class TableLine(NamedTuple):
    position: str
    region: str
    line: str


def iter_table_lines(text: str) -> Iterator[TableLine]:
    """Yield every line that looks like a table row.

    Column captions, lines without a leading 1-2 digit position and
    positions outside 1..30 are dropped without complaint; OCR output
    always carries borders, watermarks and stray glyphs.
    """
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or _HEADER_LINE_RE.match(line):
            continue
        match = _POSITION_RE.match(line)
        if match is None:
            continue
        position = normalize_position(match.group(1))
        if not position:
            logger.debug("Discarding line with out-of-range position: %r", line)
            continue
        yield TableLine(position, line[match.end() :].strip(), line)


def find_best_lap(region: str) -> str:
    match = _BEST_LAP_RE.search(region)
    return match.group(0) if match else ""


def find_time_or_gap(region: str, best_lap: str = "") -> str:
    """Return the first gap, race time or retirement marker in ``region``.

    The token already claimed as ``best_lap`` is skipped once so that a line
    carrying both a lap time and a gap reports the gap here.
    """
    skip = best_lap
    for match in _TIME_OR_GAP_RE.finditer(region):
        value = match.group(0)
        if skip and value == skip:
            skip = ""
            continue
        return value.replace(",", ".")
    return ""


def strip_time_tokens(region: str) -> str:
    return _TIME_OR_GAP_RE.sub(" ", region)


def find_race_points(region: str) -> str:
    """Points are the last short number once times and gaps are gone."""
    numbers = _POINTS_RE.findall(strip_time_tokens(region))
    return numbers[-1] if numbers else ""


def detect_status(line: str) -> str:
    upper = line.upper()
    for marker in STATUS_MARKERS:
        if marker in upper:
            return marker
    return FINISHED


def strip_team(text: str, team: str) -> str:
    """Remove ``team`` from ``text``, including OCR'd spellings with squeezed spaces."""
    if not team:
        return text
    if team in KNOWN_TEAMS:
        pattern = _TEAM_LETTER_GAP.join(re.escape(char) for char in team.replace(" ", ""))
    else:
        pattern = re.escape(team)
    return re.sub(pattern, " ", text, flags=re.IGNORECASE)


def integer_tokens(region: str) -> list[str]:
    return _INTEGER_RE.findall(region)


def find_standings_points(tokens: list[str]) -> int:
    """Index of the points token, or -1.

    Points are usually the first value above 5; early in a season every
    value can be small, so the fourth token is taken as a fallback.
    """
    for index, token in enumerate(tokens):
        if int(token) > 5 or index > 2:
            return index
    return -1


def extract_race_fields(
    position: str, region: str, line: str, event_id: str = ""
) -> dict[str, str]:
    row = empty_row(TableType.RACE)
    best_lap = find_best_lap(region)

    name_segment = _POINTS_RE.sub(" ", strip_time_tokens(region))
    team = match_team(name_segment)
    driver_raw = strip_team(name_segment, team).strip()

    row["event_id"] = event_id
    row["position"] = position
    row["driver_name"] = clean_driver_name(driver_raw)
    row["team"] = team if team != driver_raw else ""
    row["time_or_gap"] = find_time_or_gap(region, best_lap)
    row["best_lap"] = best_lap
    row["points"] = find_race_points(region)
    row["status"] = detect_status(line)
    return row


def extract_standings_fields(
    position: str, region: str, table_type: TableType
) -> dict[str, str]:
    row = empty_row(table_type)
    tokens = integer_tokens(region)
    points_index = find_standings_points(tokens)
    team = match_team(region)

    row["position"] = position
    row["team"] = team
    row["points"] = tokens[points_index] if points_index >= 0 else ""
    if table_type is TableType.DRIVERS_STANDINGS:
        name_segment = strip_team(_INTEGER_RE.sub(" ", region), team)
        row["driver_name"] = clean_driver_name(name_segment)

    # Best effort: no column boundaries survive OCR, so a dropped or extra
    # token shifts every column after it.
    remaining = [token for index, token in enumerate(tokens) if index != points_index]
    for column, value in zip(STANDINGS_NUMERIC_COLUMNS, remaining):
        row[column] = value
    return row


def parse_race_results(text: str, event_id: str) -> list[dict[str, str]]:
    return [
        extract_race_fields(table_line.position, table_line.region, table_line.line, event_id)
        for table_line in iter_table_lines(text)
    ]


def parse_standings(text: str, table_type: TableType) -> list[dict[str, str]]:
    if table_type is TableType.RACE:
        raise ValueError("parse_standings only handles standings tables.")
    return [
        extract_standings_fields(table_line.position, table_line.region, table_type)
        for table_line in iter_table_lines(text)
    ]


def parse_table(text: str, table_type: TableType, event_id: str = "") -> list[dict[str, str]]:
    """Parse OCR text with the extractor that matches ``table_type``."""
    if table_type is TableType.RACE:
        rows = parse_race_results(text, event_id)
    elif table_type in (TableType.DRIVERS_STANDINGS, TableType.CONSTRUCTORS_STANDINGS):
        rows = parse_standings(text, table_type)
    else:
        raise ValueError(f"Unsupported table type: {table_type!r}")
    logger.info("Parsed %d %s row(s)", len(rows), table_type.value)
    return rows
