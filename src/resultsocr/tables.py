"""Table shapes, header schemas and the team roster."""

from __future__ import annotations

from enum import Enum


class TableType(str, Enum):
    """Kind of table captured in a screenshot."""

    RACE = "race"
    DRIVERS_STANDINGS = "drivers-standings"
    CONSTRUCTORS_STANDINGS = "constructors-standings"

    @classmethod
    def parse(cls, value: str) -> "TableType":
        try:
            return cls(value)
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown table type {value!r}. Must be one of: {choices}") from exc


RACE_HEADERS: tuple[str, ...] = (
    "event_id",
    "position",
    "position_change",
    "driver_name",
    "team",
    "time_or_gap",
    "best_lap",
    "laps",
    "grid",
    "stops",
    "kph",
    "overtakes",
    "laps_led",
    "distance_led",
    "steward_penalty",
    "game_penalty",
    "points",
    "status",
    "fastest_lap",
    "dotd",
)

# Numeric standings columns filled left to right from leftover tokens.
STANDINGS_NUMERIC_COLUMNS: tuple[str, ...] = (
    "gain",
    "interval",
    "gap",
    "p1",
    "p2",
    "p3",
    "top5",
    "top10",
    "best_finish",
    "best_quali",
    "fastest_laps",
    "poles",
    "dotd",
    "penalty_points",
    "dnfs",
    "races",
)

DRIVERS_STANDINGS_HEADERS: tuple[str, ...] = (
    "position",
    "position_change",
    "driver_name",
    "team",
    "points",
    *STANDINGS_NUMERIC_COLUMNS,
)

CONSTRUCTORS_STANDINGS_HEADERS: tuple[str, ...] = tuple(
    header for header in DRIVERS_STANDINGS_HEADERS if header != "driver_name"
)

KNOWN_TEAMS: tuple[str, ...] = (
    "ALPINE",
    "ASTON MARTIN",
    "FERRARI",
    "HAAS FERRARI",
    "KICK SAUBER",
    "MCLAREN",
    "MERCEDES",
    "RACING BULLS",
    "RED BULL",
    "WILLIAMS",
)

# Longest first so "HAAS FERRARI" wins over "FERRARI".
TEAMS_BY_LENGTH: tuple[str, ...] = tuple(sorted(KNOWN_TEAMS, key=len, reverse=True))


def headers_for(table_type: TableType) -> tuple[str, ...]:
    """Return the fixed CSV header schema for a table type."""
    if table_type is TableType.RACE:
        return RACE_HEADERS
    if table_type is TableType.DRIVERS_STANDINGS:
        return DRIVERS_STANDINGS_HEADERS
    if table_type is TableType.CONSTRUCTORS_STANDINGS:
        return CONSTRUCTORS_STANDINGS_HEADERS
    raise ValueError(f"Unsupported table type: {table_type!r}")


def empty_row(table_type: TableType) -> dict[str, str]:
    return {header: "" for header in headers_for(table_type)}
