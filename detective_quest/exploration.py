"""Room-by-room exploration.

``step`` is a pure transition ``(state, command) -> (state, effects)``; it
never reads input or prints. ``explore`` is the thin blocking driver that
feeds it lines and hands every effect to a reporter.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from detective_quest import ledger as clue_ledger
from detective_quest.ledger import ClueNode
from detective_quest.rooms import Room, Side


class Command(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    EXIT = "exit"
    BLANK = "blank"
    INVALID = "invalid"


_COMMAND_WORDS = {
    "e": Command.LEFT,
    "left": Command.LEFT,
    "d": Command.RIGHT,
    "right": Command.RIGHT,
    "s": Command.EXIT,
    "exit": Command.EXIT,
}


def parse_command(line: str) -> Command:
    text = line.strip().lower()
    if not text:
        return Command.BLANK
    return _COMMAND_WORDS.get(text, Command.INVALID)


class EffectKind(str, Enum):
    ENTERED = "entered"
    CLUE_FOUND = "clue_found"
    CLUE_SEEN = "clue_seen"
    NO_CLUE = "no_clue"
    NO_PATH = "no_path"
    INVALID_COMMAND = "invalid_command"
    EXITED = "exited"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    room: str
    detail: Optional[str] = None

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "room": self.room, "detail": self.detail}


@dataclass(frozen=True)
class ExplorationState:
    current: Room
    ledger: Optional[ClueNode] = None
    finished: bool = False


Transition = Tuple[ExplorationState, List[Effect]]


def visit(state: ExplorationState) -> Transition:
    room = state.current
    effects = [Effect(EffectKind.ENTERED, room.name)]
    if room.clue is None:
        effects.append(Effect(EffectKind.NO_CLUE, room.name))
        return state, effects
    if room.collected:
        effects.append(Effect(EffectKind.CLUE_SEEN, room.name, room.clue))
        return state, effects
    ledger = clue_ledger.insert(state.ledger, room.clue)
    room.mark_collected()
    effects.append(Effect(EffectKind.CLUE_FOUND, room.name, room.clue))
    return replace(state, ledger=ledger), effects


def start(entrance: Room, ledger: Optional[ClueNode] = None) -> Transition:
    return visit(ExplorationState(current=entrance, ledger=ledger))


def step(state: ExplorationState, command: Command) -> Transition:
    if state.finished:
        raise RuntimeError("Exploration already finished")

    room = state.current
    if command is Command.EXIT:
        return replace(state, finished=True), [Effect(EffectKind.EXITED, room.name)]

    if command in (Command.LEFT, Command.RIGHT):
        side = Side.LEFT if command is Command.LEFT else Side.RIGHT
        nxt = room.child(side)
        if nxt is not None:
            return visit(replace(state, current=nxt))
        after, effects = visit(state)
        return after, [Effect(EffectKind.NO_PATH, room.name, side.value)] + effects

    if command is Command.INVALID:
        after, effects = visit(state)
        return after, [Effect(EffectKind.INVALID_COMMAND, room.name)] + effects

    return visit(state)


def explore(
    entrance: Room,
    read_line: Callable[[], Optional[str]],
    report: Callable[[Effect], None],
    ledger: Optional[ClueNode] = None,
) -> ExplorationState:
    """Run the read-react loop until an exit command or end of input."""
    state, effects = start(entrance, ledger)
    for effect in effects:
        report(effect)

    while not state.finished:
        line = read_line()
        if line is None:
            return replace(state, finished=True)
        state, effects = step(state, parse_command(line))
        for effect in effects:
            report(effect)
    return state
