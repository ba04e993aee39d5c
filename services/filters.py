"""In-memory filtering for artist and event listings.

Usage:
    from services.filters import FilterCriteria, filter_artists, filter_events

All functions are pure: they never mutate the input sequence and always
return a new list. Missing criteria mean "no restriction".
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

# Genre-Auswahl "alle" aus dem Frontend
ALL_GENRES = "all"


@dataclass(frozen=True)
class FilterCriteria:
    name: Optional[str] = None
    genre: Optional[str] = None
    date: Optional[date] = None

    @classmethod
    def from_args(cls, args, name_key: str = "name") -> "FilterCriteria":
        """Build criteria from request query args (``?name=&genre=&date=YYYY-MM-DD``)."""
        raw_date = (args.get("date") or "").strip()
        on = date.fromisoformat(raw_date[:10]) if raw_date else None
        return cls(
            name=(args.get(name_key) or "").strip() or None,
            genre=(args.get("genre") or "").strip() or None,
            date=on,
        )

    @property
    def genre_restriction(self) -> Optional[str]:
        if not self.genre or self.genre.lower() == ALL_GENRES:
            return None
        return self.genre


def collation_key(value: str) -> tuple:
    """Locale-aware sort key: base letters first, then accents, then case.

    "alfa", "Álvaro" and "Alvarez" sort next to each other instead of putting
    accented or capitalised names at the end like plain code point order does.
    """
    value = value or ""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return (base, decomposed.casefold(), value)


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle.casefold() in (haystack or "").casefold()


def _sorted_by(items: Iterable[T], name_of: Callable[[T], str]) -> List[T]:
    return sorted(items, key=lambda item: collation_key(name_of(item)))


def filter_artists(artists: Sequence[T], criteria: Optional[FilterCriteria] = None) -> List[T]:
    """Filter artists by genre tag and name substring, sorted by name."""
    criteria = criteria or FilterCriteria()
    genre = criteria.genre_restriction
    result = [
        a for a in artists
        if (genre is None or genre in (a.genres or []))
        and (not criteria.name or _contains(a.name, criteria.name))
    ]
    return _sorted_by(result, lambda a: a.name)


def _event_dates(event) -> List[datetime]:
    return [d.date for d in (event.dates or [])]


def _same_day(value, on: date) -> bool:
    if isinstance(value, datetime):
        value = value.date()
    return value == on


def filter_events(events: Sequence[T], criteria: Optional[FilterCriteria] = None) -> List[T]:
    """Filter events by genre, title/artist substring and calendar day, sorted by title."""
    criteria = criteria or FilterCriteria()
    genre = criteria.genre_restriction

    def matches(event) -> bool:
        if genre is not None and event.genre != genre:
            return False
        if criteria.name:
            artist_name = event.artist.name if event.artist is not None else ""
            if not (_contains(event.title, criteria.name) or _contains(artist_name, criteria.name)):
                return False
        if criteria.date is not None:
            if not any(_same_day(d, criteria.date) for d in _event_dates(event)):
                return False
        return True

    return _sorted_by([e for e in events if matches(e)], lambda e: e.title)


@dataclass(frozen=True)
class EventOccurrence:
    """Ein Event an genau einem seiner Termine (für Kalender-Listen)."""
    event: object
    date: datetime


def flatten_event_dates(events: Iterable[T], on: Optional[date] = None) -> List[EventOccurrence]:
    """One entry per (event, date), chronologically; only the matching day when ``on`` is set."""
    occurrences = []
    for event in events:
        for when in sorted(_event_dates(event)):
            if on is not None and not _same_day(when, on):
                continue
            occurrences.append(EventOccurrence(event=event, date=when))
    occurrences.sort(key=lambda o: (o.date, collation_key(o.event.title)))
    return occurrences


__all__ = [
    "ALL_GENRES",
    "FilterCriteria",
    "EventOccurrence",
    "collation_key",
    "filter_artists",
    "filter_events",
    "flatten_event_dates",
]
