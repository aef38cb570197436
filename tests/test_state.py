import pytest

from game.state import GameState


def test_default_state():
    state = GameState()
    assert state.to_dict() == {"started": False, "index": 0, "clueGiven": False}


def test_restore_round_trips_valid_record():
    record = {"started": True, "index": 2, "clueGiven": True}
    assert GameState.restore(record, total=4).to_dict() == record


def test_restore_accepts_game_state():
    state = GameState(started=True, index=4, clue_given=False)
    assert GameState.restore(state, total=4) is state


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "garbage",
        42,
        {"started": True, "index": 5, "clueGiven": False},
        {"started": True, "index": -1, "clueGiven": False},
        {"started": True, "index": "1", "clueGiven": False},
        {"started": True, "index": 1.0, "clueGiven": False},
        {"started": True, "index": True, "clueGiven": False},
        {"started": "yes", "index": 1, "clueGiven": False},
        {"started": True, "index": 1, "clueGiven": None},
    ],
)
def test_restore_resets_corrupt_state(raw):
    assert GameState.restore(raw, total=4) == GameState()


def test_restore_fills_missing_keys_with_defaults():
    assert GameState.restore({"started": True}, total=4) == GameState(started=True)


def test_advance_resets_clue():
    state = GameState(started=True, index=1, clue_given=True).advance()
    assert state == GameState(started=True, index=2, clue_given=False)
