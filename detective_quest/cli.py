from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from detective_quest.accusation import SUSTAIN_THRESHOLD, Verdict
from detective_quest.exploration import Effect, EffectKind
from detective_quest.game import Game
from detective_quest.journal import Journal
from detective_quest.rooms import render_map, teardown
from detective_quest.scenario import Scenario, resolve_scenario, scenario_to_dict

PROMPT = "\nOptions: (e) left, (d) right, (s) leave the exploration\nChoice: "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detective Quest: explore the mansion, collect clues, accuse a suspect")
    parser.add_argument("--scenario", default=None, help="Path to scenario JSON (default: built-in mansion)")
    parser.add_argument("--journal", default=None, help="Append game events to this JSONL file")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("play", help="Play interactively on stdin/stdout (default)")

    show = sub.add_parser("map", help="Print the room tree of the scenario")
    show.add_argument("--json", action="store_true", help="Print the scenario as JSON instead")

    serve = sub.add_parser("serve", help="Run the HTTP game server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5001)
    serve.add_argument("--debug", action="store_true")

    return parser


def describe(effect: Effect) -> str:
    kind = effect.kind
    if kind is EffectKind.ENTERED:
        return f"\nYou are in: {effect.room}"
    if kind is EffectKind.CLUE_FOUND:
        return f'Clue found: "{effect.detail}"'
    if kind is EffectKind.CLUE_SEEN:
        return "The clue in this room was already collected."
    if kind is EffectKind.NO_CLUE:
        return "No clue in this room."
    if kind is EffectKind.NO_PATH:
        return f"There is no path to the {effect.detail} from here."
    if kind is EffectKind.INVALID_COMMAND:
        return "Invalid command. Use 'e', 'd' or 's'."
    if kind is EffectKind.EXITED:
        return "You chose to end the exploration."
    raise ValueError(f"Unknown effect kind: {kind}")


def _line_reader(stdin: TextIO, stdout: TextIO, prompt: str) -> Callable[[], Optional[str]]:
    def read_line() -> Optional[str]:
        stdout.write(prompt)
        stdout.flush()
        line = stdin.readline()
        return line if line else None

    return read_line


def play(game: Game, stdin: TextIO, stdout: TextIO) -> int:
    def emit(text: str) -> None:
        print(text, file=stdout)

    emit(f"=== Detective Quest - {game.name} ===")
    emit("Move between rooms with 'e' (left) and 'd' (right); leave with 's'.")
    game.run(_line_reader(stdin, stdout, PROMPT), lambda effect: emit(describe(effect)))

    emit("\n=== COLLECTED CLUES (alphabetical) ===")
    listing = game.clue_listing()
    if not listing:
        emit("No clues were collected during the investigation.")
    for clue, count in listing:
        emit(f' - "{clue}" (times collected: {count})')

    suspects = game.table.suspects()
    hint = f' (e.g. "{suspects[0]}")' if suspects else ""
    emit(f"\nName the suspect you want to accuse{hint}.")
    stdout.write("Accused: ")
    stdout.flush()
    accused = stdin.readline().rstrip("\r\n")

    result = game.accuse(accused)
    if result is None:
        emit("No name given. Closing without an accusation.")
    else:
        emit(f"\nYou accused: {result.accused}")
        emit(f"Collected clues pointing at {result.accused}: {result.tally}")
        if result.verdict is Verdict.SUSTAINED:
            emit(f"Result: ACCUSATION SUSTAINED! Enough evidence (>= {SUSTAIN_THRESHOLD} clues).")
        else:
            emit("Result: WEAK ACCUSATION. Not enough clues to support it.")

    game.close()
    emit("\nClosing Detective Quest. Thanks for playing!")
    return 0


def show_map(scenario: Scenario, as_json: bool, stdout: TextIO) -> int:
    if as_json:
        print(json.dumps(scenario_to_dict(scenario), indent=2), file=stdout)
        return 0
    root = scenario.build_rooms()
    try:
        for line in render_map(root):
            print(line, file=stdout)
    finally:
        teardown(root)
    print(f"\n{len(scenario.associations)} clue/suspect associations", file=stdout)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        scenario = resolve_scenario(args.scenario)
    except (OSError, ValueError) as exc:
        print(f"Failed to load scenario: {exc}", file=sys.stderr)
        return 2

    if args.command == "map":
        return show_map(scenario, args.json, sys.stdout)

    if args.command == "serve":
        from detective_quest.server import configure

        app = configure(scenario=scenario, journal_path=Path(args.journal) if args.journal else None)
        app.run(host=args.host, port=args.port, debug=args.debug)
        return 0

    journal = Journal(Path(args.journal)) if args.journal else Journal()
    game = Game.from_scenario(scenario, journal=journal)
    return play(game, sys.stdin, sys.stdout)


if __name__ == "__main__":
    raise SystemExit(main())
