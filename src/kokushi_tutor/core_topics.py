"""Core-topic (hisshu) question ranges by exam sitting."""
from typing import NamedTuple, Optional


class CoreTopicBand(NamedTuple):
    first_year: int
    last_year: Optional[int]  # None = open-ended
    sessions: frozenset
    first_number: int
    last_number: int


CORE_TOPIC_RANGES = (
    CoreTopicBand(102, 102, frozenset("AB"), 1, 25),
    CoreTopicBand(103, 110, frozenset("AB"), 1, 35),
    CoreTopicBand(111, 113, frozenset("AB"), 1, 40),
    CoreTopicBand(114, None, frozenset("ABCD"), 1, 20),
)


def band_for_year(year: int, ranges: tuple = CORE_TOPIC_RANGES) -> CoreTopicBand | None:
    for band in ranges:
        if year < band.first_year:
            continue
        if band.last_year is not None and year > band.last_year:
            continue
        return band
    return None


def is_core_topic(year: int, session: str, number: int, ranges: tuple = CORE_TOPIC_RANGES) -> bool:
    band = band_for_year(year, ranges)
    if band is None:
        return False
    return session in band.sessions and band.first_number <= number <= band.last_number
