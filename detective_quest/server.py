"""HTTP API for a single in-memory Detective Quest game."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from detective_quest.game import PHASE_ACCUSATION, PHASE_EXPLORATION, Game
from detective_quest.journal import Journal
from detective_quest.scenario import Scenario, resolve_scenario

app = Flask(__name__)
CORS(app)

# In-memory game (will reset on server restart)
game: Optional[Game] = None


class ScenarioUnavailable(RuntimeError):
    """The configured scenario could not be loaded."""


def configure(scenario: Optional[Scenario] = None, journal_path: Optional[Path] = None) -> Flask:
    app.config["SCENARIO"] = scenario
    app.config["JOURNAL_PATH"] = journal_path
    reset_game()
    return app


def reset_game() -> Game:
    """Close the current game, if any, and start a fresh one."""
    global game
    if game is not None:
        game.close()
        game = None
    scenario = app.config.get("SCENARIO")
    if scenario is None:
        try:
            scenario = resolve_scenario()
        except (OSError, ValueError) as exc:
            print(f"Failed to load scenario: {exc}", file=sys.stderr, flush=True)
            raise ScenarioUnavailable(f"Failed to load scenario: {exc}") from exc
    journal_path = app.config.get("JOURNAL_PATH")
    game = Game.from_scenario(scenario, journal=Journal(journal_path) if journal_path else Journal())
    game.look()
    return game


def current_game() -> Game:
    if game is None:
        return reset_game()
    return game


def error(message: str, status: int = 400):
    return jsonify({"status": "error", "message": message}), status


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Start a new game at the entrance."""
    g = reset_game()
    return jsonify({
        "status": "success",
        "message": "New game started",
        "effects": [e.to_dict() for e in g.look()],
        "state": g.snapshot(),
    })


@app.route('/api/game/state', methods=['GET'])
def get_state():
    """Get current game state."""
    return jsonify(current_game().snapshot())


@app.route('/api/game/move', methods=['POST'])
def move():
    """Apply one exploration command."""
    data = request.get_json(silent=True) or {}
    command = data.get("command")

    if not isinstance(command, str):
        return error("command required")

    g = current_game()
    if g.phase != PHASE_EXPLORATION:
        return error("Exploration is over")

    effects = g.move(command)
    return jsonify({
        "status": "success",
        "effects": [e.to_dict() for e in effects],
        "state": g.snapshot(),
    })


@app.route('/api/game/exit', methods=['POST'])
def exit_exploration():
    """Stop exploring and move on to the accusation."""
    g = current_game()
    if g.phase != PHASE_EXPLORATION:
        return error("Exploration is over")
    g.move("exit")
    return jsonify({"status": "success", "state": g.snapshot()})


@app.route('/api/game/clues', methods=['GET'])
def get_clues():
    """Get collected clues in alphabetical order."""
    listing = current_game().clue_listing()
    return jsonify({
        "clues": [{"clue": clue, "count": count} for clue, count in listing],
        "distinct_count": len(listing),
    })


@app.route('/api/game/accuse', methods=['POST'])
def accuse():
    """Make the final accusation. An empty name means no accusation."""
    data = request.get_json(silent=True) or {}
    accused = data.get("suspect")

    if not isinstance(accused, str):
        return error("suspect required")

    g = current_game()
    if g.phase == PHASE_EXPLORATION:
        return error("Finish exploring before making an accusation")
    if g.phase != PHASE_ACCUSATION:
        return error("Game already complete")

    result = g.accuse(accused)
    if result is None:
        return jsonify({"status": "success", "outcome": "no_accusation"})
    payload = result.to_dict()
    payload["status"] = "success"
    return jsonify(payload)


@app.errorhandler(ScenarioUnavailable)
def handle_scenario_unavailable(exc: ScenarioUnavailable):
    return error(str(exc), 500)


@app.errorhandler(ValueError)
def handle_value_error(exc: ValueError):
    return error(str(exc))


@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok", "service": "detective-quest"})
