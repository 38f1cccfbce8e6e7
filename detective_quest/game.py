from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from detective_quest import exploration
from detective_quest import ledger as clue_ledger
from detective_quest import rooms
from detective_quest.accusation import AccusationResult, evaluate
from detective_quest.associations import AssociationTable
from detective_quest.exploration import Effect, EffectKind, ExplorationState
from detective_quest.journal import Journal
from detective_quest.ledger import ClueNode
from detective_quest.rooms import Room
from detective_quest.scenario import Scenario

PHASE_EXPLORATION = "exploration"
PHASE_ACCUSATION = "accusation"
PHASE_COMPLETE = "complete"


class TeardownReport(NamedTuple):
    ledger_nodes: int
    associations: int
    rooms: int


@dataclass
class Game:
    """One investigation: a room tree, the clue ledger and the suspect table.

    The entrance is not visited until ``look`` or ``run`` is called, so a
    driver can choose to run the blocking loop itself.
    """

    entrance: Room
    table: AssociationTable
    journal: Journal = field(default_factory=Journal)
    name: str = "investigation"

    def __post_init__(self) -> None:
        self.phase = PHASE_EXPLORATION
        self.accusation: Optional[AccusationResult] = None
        self.accusation_made = False
        self._closed = False
        self._state = ExplorationState(current=self.entrance)
        self._opening: Optional[List[Effect]] = None
        self.journal.emit("game.started", {"scenario": self.name, "entrance": self.entrance.name})

    @classmethod
    def from_scenario(cls, scenario: Scenario, journal: Optional[Journal] = None) -> "Game":
        return cls(
            entrance=scenario.build_rooms(),
            table=scenario.build_table(),
            journal=journal if journal is not None else Journal(),
            name=scenario.name,
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Game is closed")

    def _ensure_exploring(self) -> None:
        self._ensure_open()
        if self.phase != PHASE_EXPLORATION:
            raise ValueError("Exploration is over")

    def _record(self, effect: Effect) -> None:
        if effect.kind is EffectKind.ENTERED:
            self.journal.emit("room.entered", {"room": effect.room})
        elif effect.kind is EffectKind.CLUE_FOUND:
            self.journal.emit("clue.collected", {"room": effect.room, "clue": effect.detail})

    @property
    def started(self) -> bool:
        return self._opening is not None

    @property
    def current_room(self) -> Room:
        self._ensure_open()
        return self._state.current

    @property
    def ledger(self) -> Optional[ClueNode]:
        self._ensure_open()
        return self._state.ledger

    def look(self) -> List[Effect]:
        """Enter the entrance on first call; afterwards replay what that produced."""
        self._ensure_open()
        if self._opening is None:
            self._state, self._opening = exploration.start(self.entrance)
            for effect in self._opening:
                self._record(effect)
        return list(self._opening)

    def move(self, line: str) -> List[Effect]:
        self._ensure_exploring()
        self.look()
        self._state, effects = exploration.step(self._state, exploration.parse_command(line))
        for effect in effects:
            self._record(effect)
        if self._state.finished:
            self._enter_accusation("exit")
        return effects

    def run(
        self,
        read_line: Callable[[], Optional[str]],
        report: Callable[[Effect], None],
    ) -> None:
        """Drive the whole exploration from ``read_line`` until exit or end of input."""
        self._ensure_exploring()
        if self.started:
            while self.phase == PHASE_EXPLORATION:
                line = read_line()
                if line is None:
                    self.finish_exploration()
                    return
                for effect in self.move(line):
                    report(effect)
            return

        exited = []

        def _report(effect: Effect) -> None:
            self._record(effect)
            if effect.kind is EffectKind.EXITED:
                exited.append(effect)
            report(effect)

        self._opening = []
        self._state = exploration.explore(self.entrance, read_line, _report)
        self._enter_accusation("exit" if exited else "end_of_input")

    def finish_exploration(self) -> None:
        """End exploration without an exit command, e.g. when input runs out."""
        self._ensure_open()
        if self.phase != PHASE_EXPLORATION:
            return
        self._state = ExplorationState(
            current=self._state.current, ledger=self._state.ledger, finished=True
        )
        self._enter_accusation("end_of_input")

    def _enter_accusation(self, reason: str) -> None:
        self.phase = PHASE_ACCUSATION
        self.journal.emit(
            "exploration.finished",
            {
                "reason": reason,
                "room": self._state.current.name,
                "distinct_clues": clue_ledger.size(self._state.ledger),
            },
        )

    def clue_listing(self) -> List[Tuple[str, int]]:
        self._ensure_open()
        return list(clue_ledger.inorder(self._state.ledger))

    def accuse(self, name: str) -> Optional[AccusationResult]:
        """Score an accusation. An empty name means no accusation and returns None."""
        self._ensure_open()
        if self.phase == PHASE_COMPLETE:
            raise ValueError("Accusation already made")
        if self.phase != PHASE_ACCUSATION:
            raise ValueError("Finish exploring before making an accusation")

        self.phase = PHASE_COMPLETE
        self.accusation_made = True
        if not name:
            self.journal.emit("accusation.skipped", {})
            return None

        result = evaluate(self._state.ledger, name, self.table.lookup)
        self.accusation = result
        self.journal.emit(
            "accusation.made",
            {"accused": result.accused, "tally": result.tally, "verdict": result.verdict.value},
        )
        return result

    def snapshot(self) -> Dict[str, Any]:
        self._ensure_open()
        room = self._state.current
        outcome: Optional[Dict[str, Any]] = None
        if self.accusation is not None:
            outcome = self.accusation.to_dict()
        elif self.accusation_made:
            outcome = {"outcome": "no_accusation"}
        return {
            "scenario": self.name,
            "phase": self.phase,
            "room": {
                "name": room.name,
                "has_clue": room.clue is not None,
                "left": room.left is not None,
                "right": room.right is not None,
            },
            "distinct_clues": clue_ledger.size(self._state.ledger),
            "clues_collected": clue_ledger.total(self._state.ledger),
            "accusation": outcome,
        }

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> Optional[TeardownReport]:
        """Release ledger, table and rooms in that order. Only the first call releases."""
        if self._closed:
            return None
        report = TeardownReport(
            ledger_nodes=clue_ledger.teardown(self._state.ledger),
            associations=self.table.teardown(),
            rooms=rooms.teardown(self.entrance),
        )
        self._closed = True
        self.journal.emit("game.closed", report._asdict())
        return report
