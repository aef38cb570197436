from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class GameState:
    """Progress of one player. Owned by a single session, never shared."""

    started: bool = False
    index: int = 0
    clue_given: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"started": self.started, "index": self.index, "clueGiven": self.clue_given}

    def advance(self) -> "GameState":
        return replace(self, index=self.index + 1, clue_given=False)

    @classmethod
    def restore(cls, raw: Any, total: int) -> "GameState":
        """Rebuild a state from a stored record, falling back to defaults.

        Accepts a GameState or the mapping produced by ``to_dict``. Anything
        absent, mistyped or with ``index`` outside ``[0, total]`` is treated
        as corrupt and replaced by a fresh state.
        """
        if isinstance(raw, GameState):
            state = raw
        elif isinstance(raw, Mapping):
            state = cls(
                started=raw.get("started", False),
                index=raw.get("index", 0),
                clue_given=raw.get("clueGiven", False),
            )
        else:
            return cls()

        if not _is_valid(state, total):
            return cls()
        return state


def _is_valid(state: GameState, total: int) -> bool:
    # bool is an int subclass; a boolean index is still corrupt
    if not isinstance(state.index, int) or isinstance(state.index, bool):
        return False
    if not isinstance(state.started, bool) or not isinstance(state.clue_given, bool):
        return False
    return 0 <= state.index <= total
