from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple


_NON_LETTERS = re.compile(r"[^a-z]")


def normalize(text: Optional[str]) -> str:
    return (text or "").lower().strip()


def letters_only(text: str) -> str:
    return _NON_LETTERS.sub("", text.lower())


@dataclass(frozen=True)
class LocationEntry:
    """One stop of the hunt: accepted answer variants plus a single clue."""

    answers: Tuple[str, ...]
    clue: str

    def __post_init__(self) -> None:
        answers = tuple(normalize(a) for a in self.answers)
        if not answers or not all(answers):
            raise ValueError("LocationEntry needs at least one non-blank answer")
        object.__setattr__(self, "answers", answers)

    def matches(self, message: str) -> bool:
        return any(answer in message for answer in self.answers)

    def matches_letters_only(self, message: str) -> bool:
        # "is it ..." probes ignore spaces and punctuation on both sides
        cleaned = letters_only(message)
        return any(letters_only(answer) in cleaned for answer in self.answers)


class Catalog:
    """Fixed, ordered list of locations. Index order is the puzzle order."""

    def __init__(self, entries: Sequence[LocationEntry]) -> None:
        self._entries: Tuple[LocationEntry, ...] = tuple(entries)

    def get(self, index: int) -> Optional[LocationEntry]:
        # No wrap-around for negative indices; anything outside is "not found"
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LocationEntry]:
        return iter(self._entries)


LOCATIONS = Catalog(
    [
        LocationEntry(
            answers=("wellington",),
            clue="A soldier rides where money sleeps, stone and power the city keeps.",
        ),
        LocationEntry(
            answers=("monument",),
            clue="From ash and flame the city rose, a tall reminder heavenward goes.",
        ),
        LocationEntry(
            answers=("golden hinde", "hinde"),
            clue="Wooden decks and cannon old, near food and crowds and stories told.",
        ),
        LocationEntry(
            answers=("hawksmoor", "christ church"),
            clue=(
                "A pale spire towers over market stalls, "
                "raised by the architect whose name it recalls."
            ),
        ),
    ]
)
