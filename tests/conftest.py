import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from detective_quest.associations import AssociationTable
from detective_quest.rooms import Side, create_room, link
from detective_quest.scenario import Scenario


@pytest.fixture
def small_map():
    """Entrance -> Lib(glove) -> Kitchen(tea) / Garden(no clue)."""
    entrance = create_room("Entrance")
    lib = create_room("Lib", "glove")
    kitchen = create_room("Kitchen", "tea")
    garden = create_room("Garden")
    link(entrance, Side.LEFT, lib)
    link(lib, Side.LEFT, kitchen)
    link(lib, Side.RIGHT, garden)
    return entrance


@pytest.fixture
def small_table():
    return AssociationTable.from_pairs([("glove", "Smith"), ("tea", "Jones")])


@pytest.fixture
def small_scenario():
    return Scenario.from_dict({
        "name": "Small house",
        "entrance": "entrance",
        "rooms": [
            {"id": "entrance", "name": "Entrance", "left": "lib"},
            {"id": "lib", "name": "Lib", "clue": "glove", "left": "kitchen", "right": "garden"},
            {"id": "kitchen", "name": "Kitchen", "clue": "tea"},
            {"id": "garden", "name": "Garden"},
        ],
        "associations": [
            {"clue": "glove", "suspect": "Smith"},
            {"clue": "tea", "suspect": "Jones"},
        ],
    })
