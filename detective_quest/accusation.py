from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from detective_quest.ledger import ClueNode, Resolver, count_matching

# Collected clues needed before an accusation holds up.
SUSTAIN_THRESHOLD = 2


class Verdict(str, Enum):
    SUSTAINED = "sustained"
    WEAK = "weak"


@dataclass(frozen=True)
class AccusationResult:
    accused: str
    tally: int
    verdict: Verdict

    @property
    def sustained(self) -> bool:
        return self.verdict is Verdict.SUSTAINED

    def to_dict(self) -> dict:
        return {
            "outcome": "accusation",
            "accused": self.accused,
            "tally": self.tally,
            "verdict": self.verdict.value,
        }


def verdict_for(tally: int) -> Verdict:
    return Verdict.SUSTAINED if tally >= SUSTAIN_THRESHOLD else Verdict.WEAK


def evaluate(ledger: Optional[ClueNode], accused: str, resolver: Resolver) -> AccusationResult:
    """Tally the collected clues pointing at ``accused``.

    The name is compared byte for byte with the suspects the resolver returns.
    An empty name is not an accusation at all and must be handled by the caller.
    """
    if not accused:
        raise ValueError("accused name must not be empty")
    tally = count_matching(ledger, accused, resolver)
    return AccusationResult(accused=accused, tally=tally, verdict=verdict_for(tally))
