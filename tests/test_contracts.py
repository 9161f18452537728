import pytest
from pydantic import ValidationError

from gridchase.sim.contracts import (
    AdversaryView,
    CategoryConfig,
    Decision,
    DecisionState,
    Direction,
    TacticsConfig,
    TickInput,
    coerce_direction,
    coerce_tick_input,
)
from gridchase.sim.coords import Coordinate


def test_coordinate_value_semantics() -> None:
    a = Coordinate(1, 2)

    assert a == Coordinate(1, 2)
    assert len({a, Coordinate(1, 2)}) == 1
    assert a.distance(Coordinate(4, 6)) == 5.0
    assert a.offset(-1, 1) == Coordinate(0, 3)
    assert str(a) == "1,2"


def test_category_config_requires_distinct_values() -> None:
    with pytest.raises(ValidationError):
        CategoryConfig(obstacle=1, collectible=1, bonus=3)

    with pytest.raises(ValidationError):
        CategoryConfig(obstacle=-1, collectible=2, bonus=3)

    config = CategoryConfig(obstacle=7, collectible=8, bonus=9)
    assert config.obstacle == 7


def test_tactics_config_rejects_negative_thresholds() -> None:
    with pytest.raises(ValidationError):
        TacticsConfig(danger_threshold=-1)

    with pytest.raises(ValidationError):
        TacticsConfig(unknown=1)


def test_adversary_vulnerability_threshold() -> None:
    adversary = AdversaryView(position=Coordinate(0, 0), vulnerable_time=5)

    assert adversary.is_vulnerable()
    assert adversary.is_vulnerable(4.5)
    assert not adversary.is_vulnerable(5)
    assert not AdversaryView(position={"x": 1, "y": 1}).is_vulnerable()


def test_direction_coercion() -> None:
    assert coerce_direction("left") == Direction.LEFT
    assert coerce_direction(Direction.UP) == Direction.UP
    assert coerce_direction("fly") is None
    assert Direction.UP.delta == (0, 1)
    assert Direction.LEFT.delta == (-1, 0)


def test_tick_input_validation() -> None:
    valid = coerce_tick_input(
        {
            "grid": [[0, 1], [2, 3]],
            "position": {"x": 0, "y": 1},
            "adversaries": [{"position": {"x": 1, "y": 0}, "vulnerable_time": 3}],
        }
    )
    assert isinstance(valid, TickInput)
    assert valid.position == Coordinate(0, 1)
    assert valid.adversaries[0].position == Coordinate(1, 0)

    assert coerce_tick_input({"grid": [[0, 1], [2]], "position": {"x": 0, "y": 0}}) is None
    assert coerce_tick_input({"grid": [[0]], "position": {"x": 0, "y": 0}, "extra": 1}) is None


def test_decision_dump_round_trips() -> None:
    decision = Decision(
        direction=Direction.DOWN,
        state=DecisionState.ESCAPE,
        target=Coordinate(2, 3),
    )
    restored = Decision.model_validate(decision.model_dump())

    assert restored == decision
    assert not restored.fallback


def test_adversary_view_is_read_only() -> None:
    adversary = AdversaryView(position=Coordinate(0, 0), vulnerable_time=5)

    with pytest.raises(ValidationError):
        adversary.vulnerable_time = 0
