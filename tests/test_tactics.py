import pytest

from gridchase.sim import tactics
from gridchase.sim.contracts import (
    AdversaryView,
    CategoryConfig,
    Decision,
    DecisionState,
    Direction,
    TacticsConfig,
    TickInput,
)
from gridchase.sim.coords import Coordinate
from gridchase.sim.grid import UNREACHED, Grid
from gridchase.sim.movement import valid_neighbors
from gridchase.sim.tactics import (
    TacticalPolicy,
    build_situation,
    classify_state,
    dispatch,
    escape,
)

CATEGORIES = CategoryConfig(obstacle=1, collectible=2, bonus=3)
TUNING = TacticsConfig(
    danger_threshold=3, chase_threshold=10, bonus_lookahead=3, spawn_radius=3
)
WALL = CATEGORIES.obstacle
DOT = CATEGORIES.collectible
PELLET = CATEGORIES.bonus


def _danger(x: int, y: int) -> AdversaryView:
    return AdversaryView(position=Coordinate(x, y))


def _prey(x: int, y: int) -> AdversaryView:
    return AdversaryView(position=Coordinate(x, y), vulnerable_time=20)


def _situation(grid: Grid, position: Coordinate, adversaries: list[AdversaryView]):
    return build_situation(
        grid, position, adversaries, categories=CATEGORIES, tuning=TUNING
    )


def _policy() -> TacticalPolicy:
    return TacticalPolicy(categories=CATEGORIES, tuning=TUNING)


def test_corridor_first_step_is_right() -> None:
    grid = Grid.from_rows([[0, 0, 0, 0, DOT]])
    decision = _policy().decide(grid=grid, position=Coordinate(0, 0), adversaries=[])

    assert decision.state == DecisionState.COLLECT
    assert decision.direction == Direction.RIGHT
    assert decision.target == Coordinate(4, 0)
    assert not decision.fallback


def test_escape_with_one_safe_exit() -> None:
    grid = Grid.from_rows(
        [
            [WALL, 0, WALL],
            [WALL, 0, WALL],
            [WALL, 0, WALL],
        ]
    )
    decision = _policy().decide(
        grid=grid, position=Coordinate(1, 1), adversaries=[_danger(1, 0)]
    )

    assert decision.state == DecisionState.ESCAPE
    assert decision.direction == Direction.UP
    assert decision.target == Coordinate(1, 2)


@pytest.mark.parametrize(
    "adversaries",
    [
        [_danger(2, 0)],
        [_danger(0, 2), _danger(4, 2)],
        [_danger(2, 4), _danger(3, 2), _prey(1, 2)],
    ],
)
def test_escape_maximizes_minimum_distance(adversaries: list[AdversaryView]) -> None:
    grid = Grid(5, 5)
    grid.set(1, 1, WALL)
    grid.set(3, 3, WALL)
    position = Coordinate(2, 2)
    situation = _situation(grid, position, adversaries)

    decision = escape(situation)
    assert decision is not None

    dangerous = situation.dangerous()

    def safety(neighbor: Coordinate) -> float:
        field = grid.all_distances(neighbor, WALL)
        distances = [
            field.get_at(a.position)
            for a in dangerous
            if field.get_at(a.position) != UNREACHED
        ]
        return min(distances) if distances else float("inf")

    chosen = safety(decision.target)
    for neighbor in valid_neighbors(grid, position, WALL):
        assert chosen >= safety(neighbor)


def test_escape_breaks_ties_on_average_distance() -> None:
    grid = Grid(9, 1)
    position = Coordinate(4, 0)
    adversaries = [_danger(0, 0), _danger(0, 0), _danger(8, 0)]

    decision = escape(_situation(grid, position, adversaries))

    assert decision is not None
    assert decision.direction == Direction.RIGHT


def test_escape_without_moves_falls_back() -> None:
    grid = Grid.from_rows(
        [
            [WALL, WALL, WALL],
            [WALL, 0, WALL],
            [WALL, WALL, WALL],
        ]
    )
    situation = _situation(grid, Coordinate(1, 1), [_danger(1, 1)])

    assert escape(situation) is None
    decision = dispatch(DecisionState.ESCAPE, situation)
    assert decision.state == DecisionState.COLLECT
    assert decision.direction == Direction.UP
    assert decision.fallback


def test_chase_nearest_vulnerable_adversary() -> None:
    grid = Grid(11, 11)
    policy = _policy()
    decision = policy.decide(
        grid=grid,
        position=Coordinate(0, 0),
        adversaries=[_prey(0, 4), _prey(2, 0)],
    )

    assert decision.state == DecisionState.CHASE
    assert decision.target == Coordinate(2, 0)
    assert decision.direction == Direction.RIGHT


def test_chase_ignores_spawn_zone_and_distant_prey() -> None:
    grid = Grid(11, 11)
    grid.set(0, 10, DOT)

    inside_zone = _situation(grid, Coordinate(0, 0), [_prey(5, 5)])
    assert inside_zone.in_spawn_zone(Coordinate(5, 5))
    assert classify_state(inside_zone) == DecisionState.COLLECT

    too_far = _situation(grid, Coordinate(0, 0), [_prey(10, 10)])
    assert classify_state(too_far) == DecisionState.COLLECT


def test_escape_outranks_chase() -> None:
    grid = Grid(11, 11)
    situation = _situation(grid, Coordinate(0, 0), [_prey(1, 0), _danger(0, 2)])
    assert classify_state(situation) == DecisionState.ESCAPE


def test_unreachable_adversary_is_not_a_threat() -> None:
    grid = Grid.from_rows(
        [
            [0, WALL, 0],
            [0, WALL, 0],
            [0, WALL, 0],
        ]
    )
    situation = _situation(grid, Coordinate(0, 0), [_danger(2, 0)])
    assert situation.distance_to(Coordinate(2, 0)) == UNREACHED
    assert classify_state(situation) == DecisionState.COLLECT


def test_seek_bonus_when_danger_approaches() -> None:
    grid = Grid(11, 11)
    grid.set(1, 0, PELLET)
    grid.set(0, 8, DOT)
    situation = _situation(grid, Coordinate(0, 0), [_danger(0, 5)])

    assert classify_state(situation) == DecisionState.SEEK_BONUS
    decision = _policy().decide(
        grid=grid, position=Coordinate(0, 0), adversaries=[_danger(0, 5)]
    )
    assert decision.state == DecisionState.SEEK_BONUS
    assert decision.direction == Direction.RIGHT
    assert decision.target == Coordinate(1, 0)


def test_seek_bonus_requires_a_bonus_cell() -> None:
    grid = Grid(11, 11)
    grid.set(0, 8, DOT)
    situation = _situation(grid, Coordinate(0, 0), [_danger(0, 5)])
    assert classify_state(situation) == DecisionState.COLLECT


def test_seek_bonus_falls_back_when_bonus_unreachable() -> None:
    grid = Grid.from_rows(
        [
            [0, 0, WALL, PELLET],
            [0, DOT, WALL, WALL],
        ]
    )
    situation = _situation(grid, Coordinate(0, 0), [])
    decision = dispatch(DecisionState.SEEK_BONUS, situation)

    assert decision.state == DecisionState.COLLECT
    assert decision.target == Coordinate(1, 1)
    assert decision.fallback


def test_chase_without_prey_falls_back_to_collect() -> None:
    grid = Grid.from_rows([[0, DOT, 0]])
    decision = dispatch(DecisionState.CHASE, _situation(grid, Coordinate(0, 0), []))

    assert decision.state == DecisionState.COLLECT
    assert decision.direction == Direction.RIGHT
    assert decision.fallback


def test_collect_without_dots_picks_first_valid_move() -> None:
    grid = Grid(5, 1)
    decision = _policy().decide(grid=grid, position=Coordinate(0, 0), adversaries=[])

    assert decision.direction == Direction.RIGHT
    assert decision.fallback


def test_boxed_in_returns_default_direction() -> None:
    grid = Grid.from_rows(
        [
            [WALL, WALL, WALL],
            [WALL, 0, WALL],
            [WALL, WALL, WALL],
        ]
    )
    decision = _policy().decide(grid=grid, position=Coordinate(1, 1), adversaries=[])
    assert decision.direction == Direction.UP


def test_collect_prefers_wrapped_route() -> None:
    grid = Grid.from_rows([[0, 0, 0, 0, 0, DOT]], cyclic=True)
    decision = _policy().decide(grid=grid, position=Coordinate(0, 0), adversaries=[])

    assert decision.direction == Direction.LEFT


def test_safety_net_replaces_illegal_move(monkeypatch: pytest.MonkeyPatch) -> None:
    def _off_grid(situation: tactics.Situation) -> Decision:
        return Decision(direction=Direction.LEFT, state=DecisionState.COLLECT)

    monkeypatch.setitem(tactics.HANDLERS, DecisionState.COLLECT, _off_grid)
    grid = Grid(3, 1)
    decision = _policy().decide(grid=grid, position=Coordinate(0, 0), adversaries=[])

    assert decision.direction == Direction.RIGHT
    assert decision.target == Coordinate(1, 0)
    assert decision.fallback


def test_decide_does_not_mutate_grid() -> None:
    grid = Grid.from_rows([[0, DOT, PELLET], [0, 0, 0]])
    before = grid.rows()
    _policy().decide(grid=grid, position=Coordinate(0, 0), adversaries=[_danger(2, 1)])
    assert grid.rows() == before


def test_decide_tick_from_boundary_input() -> None:
    tick = TickInput.model_validate(
        {
            "grid": [[0, 0, 0, 0, DOT]],
            "cyclic": False,
            "position": {"x": 0, "y": 0},
            "adversaries": [],
        }
    )
    assert _policy().decide_tick(tick).direction == Direction.RIGHT


def test_vulnerability_threshold_is_tunable() -> None:
    grid = Grid(11, 11)
    adversary = AdversaryView(position=Coordinate(0, 2), vulnerable_time=0.5)

    lenient = TacticalPolicy(categories=CATEGORIES, tuning=TUNING)
    strict = TacticalPolicy(
        categories=CATEGORIES,
        tuning=TUNING.model_copy(update={"vulnerable_threshold": 1.0}),
    )

    common = {"grid": grid, "position": Coordinate(0, 0), "adversaries": [adversary]}
    assert lenient.decide(**common).state == DecisionState.CHASE
    assert strict.decide(**common).state == DecisionState.ESCAPE


def test_escape_breaks_remaining_ties_toward_collectibles() -> None:
    grid = Grid(9, 1)
    grid.set(7, 0, DOT)
    adversaries = [_danger(0, 0), _danger(8, 0)]

    decision = escape(_situation(grid, Coordinate(4, 0), adversaries))

    assert decision is not None
    assert decision.direction == Direction.RIGHT
    assert decision.target == Coordinate(5, 0)


def test_seek_bonus_ignores_danger_in_spawn_zone() -> None:
    grid = Grid(11, 11)
    grid.set(1, 0, PELLET)
    situation = _situation(grid, Coordinate(0, 0), [_danger(2, 3)])

    assert situation.in_spawn_zone(Coordinate(2, 3))
    assert situation.distance_to(Coordinate(2, 3)) == 5
    assert classify_state(situation) == DecisionState.COLLECT


@pytest.mark.parametrize(
    ("y", "expected"),
    [
        (6, DecisionState.SEEK_BONUS),
        (7, DecisionState.COLLECT),
    ],
)
def test_seek_bonus_lookahead_horizon(y: int, expected: DecisionState) -> None:
    grid = Grid(11, 11)
    grid.set(1, 0, PELLET)
    situation = _situation(grid, Coordinate(0, 0), [_danger(0, y)])

    assert situation.distance_to(Coordinate(0, y)) == y
    assert classify_state(situation) == expected


def test_collect_fallback_skips_moves_that_wrap_onto_itself() -> None:
    grid = Grid(5, 1, cyclic=True)
    decision = _policy().decide(grid=grid, position=Coordinate(2, 0), adversaries=[])

    assert decision.fallback
    assert decision.direction == Direction.LEFT
    assert decision.target == Coordinate(1, 0)
