from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from detective_quest.associations import DEFAULT_BUCKET_COUNT, AssociationTable
from detective_quest.rooms import Room, Side, create_room, link

SCENARIO_ENV = "DETECTIVE_QUEST_SCENARIO"


@dataclass(frozen=True)
class RoomSpec:
    id: str
    name: str
    clue: Optional[str] = None
    left: Optional[str] = None
    right: Optional[str] = None


@dataclass(frozen=True)
class Scenario:
    name: str
    entrance: str
    rooms: Tuple[RoomSpec, ...]
    associations: Tuple[Tuple[str, str], ...]
    bucket_count: int = DEFAULT_BUCKET_COUNT
    source: Optional[Path] = field(default=None, compare=False)

    @staticmethod
    def from_dict(raw: Dict[str, Any], source: Optional[Path] = None) -> "Scenario":
        if not isinstance(raw, dict):
            raise ValueError("Scenario must be a JSON object")
        where = f"{source}: " if source else ""
        try:
            rooms = tuple(
                RoomSpec(
                    id=str(item["id"]),
                    name=str(item.get("name", item["id"])),
                    clue=_optional_str(item, "clue"),
                    left=_optional_str(item, "left"),
                    right=_optional_str(item, "right"),
                )
                for item in _list_of_objects(raw, "rooms")
            )
            associations = tuple(
                (_required_str(item, "clue"), _required_str(item, "suspect"))
                for item in _list_of_objects(raw, "associations")
            )
        except KeyError as exc:
            raise ValueError(f"{where}missing field {exc}") from exc
        except ValueError as exc:
            raise ValueError(f"{where}{exc}") from exc

        bucket_count = raw.get("bucket_count", DEFAULT_BUCKET_COUNT)
        if isinstance(bucket_count, bool) or not isinstance(bucket_count, int):
            raise ValueError(f"{where}bucket_count must be an integer, got {bucket_count!r}")
        scenario = Scenario(
            name=str(raw.get("name", source.stem if source else "scenario")),
            entrance=str(raw.get("entrance", rooms[0].id if rooms else "")),
            rooms=rooms,
            associations=associations,
            bucket_count=bucket_count,
            source=source,
        )
        scenario.validate()
        return scenario

    @staticmethod
    def load(path: Path) -> "Scenario":
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
        return Scenario.from_dict(raw, source=path)

    @staticmethod
    def default() -> "Scenario":
        return Scenario.from_dict(DEFAULT_SCENARIO)

    def validate(self) -> None:
        if self.bucket_count < 1:
            raise ValueError(f"bucket_count must be positive, got {self.bucket_count}")
        if not self.rooms:
            raise ValueError("Scenario has no rooms")

        by_id: Dict[str, RoomSpec] = {}
        for spec in self.rooms:
            if spec.id in by_id:
                raise ValueError(f"Duplicate room id: {spec.id}")
            by_id[spec.id] = spec
        if self.entrance not in by_id:
            raise ValueError(f"Unknown entrance room: {self.entrance}")

        parent_of: Dict[str, str] = {}
        for spec in self.rooms:
            for child in (spec.left, spec.right):
                if child is None:
                    continue
                if child not in by_id:
                    raise ValueError(f"Room '{spec.id}' links to unknown room '{child}'")
                if child in parent_of:
                    raise ValueError(
                        f"Room '{child}' has two parents: '{parent_of[child]}' and '{spec.id}'"
                    )
                parent_of[child] = spec.id

        if self.entrance in parent_of:
            raise ValueError(f"Entrance '{self.entrance}' cannot be a child of '{parent_of[self.entrance]}'")

        reachable = set()
        pending = [self.entrance]
        while pending:
            room_id = pending.pop()
            reachable.add(room_id)
            spec = by_id[room_id]
            pending.extend(c for c in (spec.left, spec.right) if c is not None)
        unreachable = sorted(set(by_id) - reachable)
        if unreachable:
            raise ValueError(f"Rooms not reachable from entrance: {', '.join(unreachable)}")

    def room_count(self) -> int:
        return len(self.rooms)

    def build_rooms(self) -> Room:
        built = {spec.id: create_room(spec.name, spec.clue) for spec in self.rooms}
        for spec in self.rooms:
            if spec.left is not None:
                link(built[spec.id], Side.LEFT, built[spec.left])
            if spec.right is not None:
                link(built[spec.id], Side.RIGHT, built[spec.right])
        return built[self.entrance]

    def build_table(self) -> AssociationTable:
        return AssociationTable.from_pairs(self.associations, bucket_count=self.bucket_count)


def _list_of_objects(raw: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = raw.get(key, [])
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValueError(f"'{key}' must be a list of objects")
    return items


def _optional_str(item: Dict[str, Any], key: str) -> Optional[str]:
    value = item.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string or null, got {value!r}")
    return value


def _required_str(item: Dict[str, Any], key: str) -> str:
    value = item[key]
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {value!r}")
    return value


def resolve_scenario(path: Optional[str] = None) -> Scenario:
    raw = path or os.getenv(SCENARIO_ENV, "").strip()
    if raw:
        return Scenario.load(Path(raw))
    return Scenario.default()


#                  Entrance Hall
#                 /             \
#           Library            Living Room
#           /     \             /       \
#      Kitchen   Garden    Corridor   Workshop
DEFAULT_SCENARIO: Dict[str, Any] = {
    "name": "Blackwood Mansion",
    "entrance": "hall",
    "rooms": [
        {"id": "hall", "name": "Entrance Hall", "left": "library", "right": "living_room"},
        {"id": "library", "name": "Library", "clue": "Dusty glove print", "left": "kitchen", "right": "garden"},
        {"id": "living_room", "name": "Living Room", "clue": "Broken glass with footprints", "left": "corridor", "right": "workshop"},
        {"id": "kitchen", "name": "Kitchen", "clue": "herbal tea residue"},
        {"id": "garden", "name": "Garden"},
        {"id": "corridor", "name": "Corridor", "clue": "torn notes with initials A.B."},
        {"id": "workshop", "name": "Workshop", "clue": "varnished wrench fragment"},
    ],
    "associations": [
        {"clue": "Dusty glove print", "suspect": "Mr. Almeida"},
        {"clue": "Broken glass with footprints", "suspect": "Mrs. Beatriz"},
        {"clue": "herbal tea residue", "suspect": "Miss Camila"},
        {"clue": "torn notes with initials A.B.", "suspect": "Mrs. Beatriz"},
        {"clue": "varnished wrench fragment", "suspect": "Mr. Almeida"},
    ],
}


def scenario_to_dict(scenario: Scenario) -> Dict[str, Any]:
    rooms: List[Dict[str, Any]] = []
    for spec in scenario.rooms:
        item: Dict[str, Any] = {"id": spec.id, "name": spec.name}
        for key in ("clue", "left", "right"):
            value = getattr(spec, key)
            if value is not None:
                item[key] = value
        rooms.append(item)
    return {
        "name": scenario.name,
        "entrance": scenario.entrance,
        "rooms": rooms,
        "associations": [{"clue": c, "suspect": s} for c, s in scenario.associations],
        "bucket_count": scenario.bucket_count,
    }
