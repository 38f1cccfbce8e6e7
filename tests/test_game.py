import pytest

from detective_quest.accusation import Verdict
from detective_quest.exploration import EffectKind
from detective_quest.game import (
    PHASE_ACCUSATION,
    PHASE_COMPLETE,
    PHASE_EXPLORATION,
    Game,
    TeardownReport,
)
from detective_quest.scenario import Scenario


@pytest.fixture
def game():
    g = Game.from_scenario(Scenario.default())
    yield g
    g.close()


def play(game, lines):
    effects = game.look()
    for line in lines:
        if game.phase != PHASE_EXPLORATION:
            break
        effects.extend(game.move(line))
    return effects


def feed(lines):
    it = iter(lines)
    return lambda: next(it, None)


def test_new_game_starts_exploring_at_entrance(game):
    assert game.phase == PHASE_EXPLORATION
    assert not game.started
    effects = game.look()
    assert game.started
    assert [e.kind for e in effects] == [EffectKind.ENTERED, EffectKind.NO_CLUE]
    assert game.current_room.name == "Entrance Hall"
    assert game.look() == effects


def test_exit_moves_to_accusation(game):
    play(game, ["e", "e", "s"])
    assert game.phase == PHASE_ACCUSATION
    assert game.clue_listing() == [("Dusty glove print", 1), ("herbal tea residue", 1)]


def test_sustained_accusation(game):
    play(game, ["d", "e", "s"])
    result = game.accuse("Mrs. Beatriz")
    assert result.tally == 2
    assert result.verdict is Verdict.SUSTAINED
    assert game.phase == PHASE_COMPLETE
    assert game.snapshot()["accusation"]["verdict"] == "sustained"


def test_weak_accusation(game):
    play(game, ["e", "s"])
    result = game.accuse("Mr. Almeida")
    assert result.tally == 1
    assert result.verdict is Verdict.WEAK


def test_empty_accusation_is_distinct_outcome(game):
    play(game, ["s"])
    assert game.accuse("") is None
    assert game.phase == PHASE_COMPLETE
    assert game.accusation is None
    assert game.snapshot()["accusation"] == {"outcome": "no_accusation"}
    assert game.journal.events("accusation.skipped")


def test_accuse_requires_finished_exploration(game):
    game.look()
    with pytest.raises(ValueError):
        game.accuse("Mr. Almeida")
    game.move("s")
    game.accuse("Mr. Almeida")
    with pytest.raises(ValueError):
        game.accuse("Mr. Almeida")


def test_move_after_exit_is_rejected(game):
    play(game, ["s"])
    with pytest.raises(ValueError):
        game.move("e")


def test_run_until_exit():
    game = Game.from_scenario(Scenario.default())
    seen = []
    game.run(feed(["d", "d", "s", "e"]), seen.append)
    assert game.phase == PHASE_ACCUSATION
    assert game.current_room.name == "Workshop"
    assert seen[-1].kind is EffectKind.EXITED
    reasons = [e["payload"]["reason"] for e in game.journal.events("exploration.finished")]
    assert reasons == ["exit"]


def test_run_until_end_of_input():
    game = Game.from_scenario(Scenario.default())
    game.run(feed(["e"]), lambda effect: None)
    assert game.phase == PHASE_ACCUSATION
    reasons = [e["payload"]["reason"] for e in game.journal.events("exploration.finished")]
    assert reasons == ["end_of_input"]


def test_run_after_look_continues_same_game():
    game = Game.from_scenario(Scenario.default())
    game.look()
    game.run(feed(["e", "e"]), lambda effect: None)
    assert game.phase == PHASE_ACCUSATION
    assert len(game.clue_listing()) == 2


@pytest.mark.parametrize("lines,ledger_nodes", [
    ([], 0),
    (["s"], 0),
    (["e", "s"], 1),
    (["e", "e", "e", "x", "s"], 2),
    (["d", "e", "d"], 2),
])
def test_close_releases_everything_once(lines, ledger_nodes):
    scenario = Scenario.default()
    game = Game.from_scenario(scenario)
    game.run(feed(lines), lambda effect: None)
    report = game.close()
    assert report == TeardownReport(
        ledger_nodes=ledger_nodes,
        associations=len(scenario.associations),
        rooms=scenario.room_count(),
    )
    assert game.closed
    assert game.close() is None


def test_closed_game_cannot_be_used(game):
    game.close()
    with pytest.raises(RuntimeError):
        game.look()
    with pytest.raises(RuntimeError):
        game.clue_listing()
    with pytest.raises(RuntimeError):
        game.accuse("Mr. Almeida")


def test_journal_records_clues(game):
    play(game, ["e", "e", "s"])
    collected = [e["payload"]["clue"] for e in game.journal.events("clue.collected")]
    assert collected == ["Dusty glove print", "herbal tea residue"]
    assert game.journal.events()[0]["type"] == "game.started"


def test_snapshot(game):
    play(game, ["e"])
    snap = game.snapshot()
    assert snap["phase"] == PHASE_EXPLORATION
    assert snap["room"] == {"name": "Library", "has_clue": True, "left": True, "right": True}
    assert snap["distinct_clues"] == 1
    assert snap["clues_collected"] == 1
    assert snap["accusation"] is None
