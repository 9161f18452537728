import pytest

from gridchase.sim.coords import Coordinate
from gridchase.sim.world_loader import LEVELS, load_level, parse_level
from gridchase.sim.world_state import build_default_world
from gridchase.sim.world_tiles import DOT, EMPTY, PELLET, WALL

SMALL = """\
#####
#P.o#
#G  #
#####
"""


def test_parse_level_flips_rows_so_up_grows_y() -> None:
    state = parse_level(SMALL)

    assert state.grid.width == 5 and state.grid.height == 4
    assert state.position == Coordinate(1, 2)
    assert state.grid.get(2, 2) == DOT
    assert state.grid.get(3, 2) == PELLET
    assert state.grid.get(0, 0) == WALL
    assert state.grid.get(1, 2) == EMPTY

    adversary = state.adversaries["adversary_0"]
    assert adversary.position == Coordinate(1, 1)
    assert adversary.start == Coordinate(1, 1)
    assert state.grid.get(1, 1) == EMPTY


@pytest.mark.parametrize(
    "text",
    [
        "",
        "###\n#.#\n###\n",
        "#####\n#PP.#\n#####\n",
        "#####\n#P.#\n#####\n",
        "#####\n#Px.#\n#####\n",
    ],
)
def test_parse_level_rejects_malformed_layouts(text: str) -> None:
    with pytest.raises(ValueError):
        parse_level(text)


def test_builtin_levels_load() -> None:
    for name, level in LEVELS.items():
        state = load_level(name)
        assert state.level_name == name
        assert state.grid.cyclic == level.cyclic
        assert state.remaining_collectibles() > 0
        assert state.grid.count(PELLET) == 4
        assert state.grid.get_at(state.position) == EMPTY


def test_classic_level_layout() -> None:
    state = build_default_world()

    assert state.position == Coordinate(10, 5)
    assert len(state.adversaries) == 3
    assert state.grid.cyclic

    flat = load_level("classic", cyclic=False)
    assert not flat.grid.cyclic


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_level("nowhere")
