"""Question identifier parsing (112-B-48, 112B48, 112 B 48, and partial input)."""
import re
from typing import NamedTuple, Optional

# Any plausible exam sitting number a user might type.
SITTING_BOUNDS = (100, 130)

# Sittings actually present in the bundled corpus. Callers with a loaded
# corpus pass Corpus.year_range instead.
DEFAULT_YEAR_RANGE = (102, 118)

_SEP = r"[\s\-_]*"
COMPLETE_PATTERN = re.compile(rf"^([0-9]{{2,3}}){_SEP}([a-dA-D]){_SEP}([0-9]{{1,3}})$")
YEAR_SESSION_PATTERN = re.compile(rf"^([0-9]{{2,3}}){_SEP}([a-dA-D]){_SEP}$")
YEAR_PATTERN = re.compile(r"^([0-9]{3})$")
DECADE_PATTERN = re.compile(r"^([0-9]{2})$")


class CompleteId(NamedTuple):
    year: int
    session: str
    number: int


class PartialId(NamedTuple):
    years: tuple
    session: Optional[str] = None


def _in_bounds(value: int, bounds: tuple) -> bool:
    low, high = bounds
    return low <= value <= high


def parse_complete(text: str) -> CompleteId | None:
    """Parse a full identifier. All three parts must be present."""
    match = COMPLETE_PATTERN.match(text.strip())
    if not match:
        return None
    return CompleteId(
        year=int(match.group(1)),
        session=match.group(2).upper(),
        number=int(match.group(3)),
    )


def parse_partial(text: str, year_range: tuple = DEFAULT_YEAR_RANGE) -> PartialId | None:
    """Parse an identifier typed part-way: "112B", "112" or a decade prefix like "11".

    A two-digit prefix expands to every sitting in that decade that falls
    within year_range.
    """
    trimmed = text.strip()

    match = YEAR_SESSION_PATTERN.match(trimmed)
    if match:
        year = int(match.group(1))
        if _in_bounds(year, SITTING_BOUNDS):
            return PartialId(years=(year,), session=match.group(2).upper())

    match = YEAR_PATTERN.match(trimmed)
    if match:
        year = int(match.group(1))
        if _in_bounds(year, SITTING_BOUNDS):
            return PartialId(years=(year,))

    match = DECADE_PATTERN.match(trimmed)
    if match:
        prefix = int(match.group(1))
        if 10 <= prefix <= 13:
            years = tuple(
                prefix * 10 + digit
                for digit in range(10)
                if _in_bounds(prefix * 10 + digit, year_range)
            )
            if years:
                return PartialId(years=years)

    return None
