"""Turn handling for the London Adventure hunt.

``handle`` is a pure transition: it takes whatever state the session holds
plus the raw player message and returns the next state with a reply
directive. Free-text questions come back as ``Delegate`` so the caller can ask
the text responder; ``take_turn`` does that, owns the responder error
boundary and reports which command the message was handled as.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, NamedTuple, Optional, Tuple, Union

from agent.core.prompt import build_policy
from game.catalog import LOCATIONS, Catalog, LocationEntry, normalize
from game.state import GameState


logger = logging.getLogger(__name__)

EMPTY_REPLY = "Say something to begin."
WELCOME_REPLY = "Welcome to London Adventure. Ask for a clue to begin."
ONLY_ONE_CLUE_REPLY = "You only get one clue per location. Make your guess."
CORRECT_REPLY = "Correct! Ask for a clue to continue."
FINISHED_REPLY = "Correct! You have completed the London Adventure 🎉"
COMPLETED_REPLY = "You have completed the London Adventure 🎉 Say anything to play again."
YES_REPLY = "Yes."
NO_REPLY = "No."
APOLOGY_REPLY = "Sorry, something went wrong, but the game continues."

CLUE_WORDS = frozenset({"clue", "hint"})
PROBE_PREFIX = "is it"

Responder = Callable[[str, str], str]



class Command(str, Enum):
    EMPTY = "empty"
    START = "start"
    RESTART = "restart"
    CLUE = "clue"
    YES_NO = "yes_no"
    GUESS = "guess"
    FREE_TEXT = "free_text"


@dataclass(frozen=True)
class Reply:
    text: str


@dataclass(frozen=True)
class Delegate:
    """Ask the text responder about ``message`` for the current ``entry``."""

    message: str
    entry: LocationEntry


Directive = Union[Reply, Delegate]


class Turn(NamedTuple):
    state: GameState
    reply: str
    command: Command


def classify(message: str, entry: LocationEntry) -> Command:
    if message in CLUE_WORDS:
        return Command.CLUE
    if message.startswith(PROBE_PREFIX):
        return Command.YES_NO
    if entry.matches(message):
        return Command.GUESS
    return Command.FREE_TEXT


def _step(
    state: Any,
    raw_message: Optional[str],
    catalog: Catalog,
) -> Tuple[GameState, Directive, Command]:
    state = GameState.restore(state, total=len(catalog))
    message = normalize(raw_message)

    if not message:
        return state, Reply(EMPTY_REPLY), Command.EMPTY

    # The first message only starts the game, whatever it says
    if not state.started:
        return replace(state, started=True), Reply(WELCOME_REPLY), Command.START

    entry = catalog.get(state.index)
    if entry is None:
        return GameState(), Reply(COMPLETED_REPLY), Command.RESTART

    command = classify(message, entry)

    if command is Command.CLUE:
        if state.clue_given:
            return state, Reply(ONLY_ONE_CLUE_REPLY), command
        return replace(state, clue_given=True), Reply(entry.clue), command

    if command is Command.YES_NO:
        answer = YES_REPLY if entry.matches_letters_only(message) else NO_REPLY
        return state, Reply(answer), command

    if command is Command.GUESS:
        state = state.advance()
        if state.index >= len(catalog):
            return state, Reply(FINISHED_REPLY), command
        return state, Reply(CORRECT_REPLY), command

    return state, Delegate(message=message, entry=entry), command


def handle(
    state: Any,
    raw_message: Optional[str],
    catalog: Catalog = LOCATIONS,
) -> Tuple[GameState, Directive]:
    new_state, directive, _ = _step(state, raw_message, catalog)
    return new_state, directive


def take_turn(
    state: Any,
    raw_message: Optional[str],
    responder: Responder,
    catalog: Catalog = LOCATIONS,
) -> Turn:
    """Run one turn and resolve free-text questions through ``responder``."""
    new_state, directive, command = _step(state, raw_message, catalog)
    if isinstance(directive, Reply):
        return Turn(new_state, directive.text, command)

    policy = build_policy(directive.entry)
    try:
        text = responder(policy, directive.message)
    except Exception:
        logger.exception("Text responder failed for message of %s chars", len(directive.message))
        return Turn(new_state, APOLOGY_REPLY, command)

    if not isinstance(text, str) or not text.strip():
        logger.warning("Text responder returned an empty or malformed reply: %r", text)
        return Turn(new_state, APOLOGY_REPLY, command)
    return Turn(new_state, text, command)


def play_turn(
    state: Any,
    raw_message: Optional[str],
    responder: Responder,
    catalog: Catalog = LOCATIONS,
) -> Tuple[GameState, str]:
    turn = take_turn(state, raw_message, responder, catalog)
    return turn.state, turn.reply
