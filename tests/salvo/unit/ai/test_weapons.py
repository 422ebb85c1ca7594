import random

import numpy as np
import pytest

from salvo.ai.probability import hunt_field
from salvo.ai.weapons import (
    WeaponOption,
    acceptance_bar,
    choose_attack,
    evaluate_pattern,
    is_acceptable,
    pattern_cells,
)
from salvo.core.grid import Grid
from salvo.core.models import STANDARD_FLEET, CellState, Coord, WeaponKind


def test_pattern_cells_translate_offsets() -> None:
    assert set(pattern_cells(Coord(0, 0), WeaponKind.CROSS5)) == {
        Coord(0, 0),
        Coord(-1, 0),
        Coord(1, 0),
        Coord(0, -1),
        Coord(0, 1),
    }
    assert pattern_cells(Coord(4, 4), WeaponKind.LINE4) == [Coord(4, 3), Coord(4, 4), Coord(4, 5)]


def test_evaluate_pattern_partitions_cells(make_grid) -> None:
    grid = make_grid(r0="xo........")
    relative = np.ones((10, 10))
    option = evaluate_pattern(grid, relative, Coord(0, 0), WeaponKind.BLOCK9)
    assert option.hit_overlap == 1
    # Five off-board cells plus one miss.
    assert option.wasted == 6
    assert set(option.new_cells) == {Coord(1, 0), Coord(1, 1)}
    assert option.efficiency == pytest.approx(2 / 9)
    assert option.yield_ == pytest.approx(2.0)


def test_low_efficiency_cross_is_never_accepted(make_grid, config) -> None:
    grid = make_grid(r4=".....o....", r5="....o.....", r6=".....o....")
    relative = np.ones((10, 10))
    option = evaluate_pattern(grid, relative, Coord(5, 5), WeaponKind.CROSS5)
    assert option.efficiency == pytest.approx(0.4)
    boosted = WeaponOption(
        coord=option.coord,
        weapon=option.weapon,
        new_cells=option.new_cells,
        wasted=option.wasted,
        hit_overlap=option.hit_overlap,
        efficiency=option.efficiency,
        yield_=1000.0,
        single_score=0.0,
    )
    for ammo in (1, 3, 10, 1000):
        for open_cells in (100, 10):
            assert not is_acceptable(option, ammo, open_cells, config)
            assert not is_acceptable(boosted, ammo, open_cells, config)


def test_acceptance_bar_relaxes_with_ammo_and_endgame(config) -> None:
    base_yield, base_margin = acceptance_bar(1, 100, config)
    assert base_yield == pytest.approx(config.weapon_min_yield)
    assert base_margin == pytest.approx(config.weapon_margin)
    more_yield, more_margin = acceptance_bar(5, 100, config)
    assert more_yield < base_yield
    assert more_margin < base_margin
    late_yield, late_margin = acceptance_bar(1, 10, config)
    assert late_yield < base_yield
    assert late_margin < base_margin
    assert acceptance_bar(5, 10, config)[0] < late_yield
    assert late_margin >= 1.0


def test_single_shot_fallback_without_ammo(empty_grid, config) -> None:
    field = hunt_field(empty_grid, STANDARD_FLEET, config)
    choice = choose_attack(empty_grid, field, {}, random.Random(1), config)
    assert choice is not None
    assert choice.weapon is WeaponKind.SINGLE
    assert choice.coord in (Coord(4, 4), Coord(5, 5))
    assert choice.option is None


def test_block_weapon_used_when_it_reveals_more_mass(empty_grid, config) -> None:
    field = hunt_field(empty_grid, STANDARD_FLEET, config)
    choice = choose_attack(empty_grid, field, {WeaponKind.BLOCK9: 1}, random.Random(2), config)
    assert choice is not None
    assert choice.weapon is WeaponKind.BLOCK9
    assert 3 <= choice.coord.row <= 6 and 3 <= choice.coord.col <= 6
    assert choice.option is not None
    assert choice.option.efficiency == 1.0


def test_weapon_not_spent_on_a_lone_candidate(make_grid, config) -> None:
    grid = make_grid(r5="...ox.....")
    field = np.zeros((10, 10))
    field[5, 5] = 1.0
    choice = choose_attack(grid, field, {WeaponKind.CROSS5: 3}, random.Random(3), config)
    assert choice is not None
    assert choice.weapon is WeaponKind.SINGLE
    assert choice.coord == Coord(5, 5)


def test_ties_are_broken_at_random(make_grid, config) -> None:
    grid = make_grid()
    field = grid.mask(CellState.UNKNOWN).astype(float)
    picks = {
        choose_attack(grid, field, {}, random.Random(seed), config).coord for seed in range(20)
    }
    assert len(picks) > 1


def test_no_unknown_cells_means_no_attack(config) -> None:
    grid = Grid.from_rows(["oooooooooo"] * 10)
    assert choose_attack(grid, np.zeros((10, 10)), {WeaponKind.BLOCK9: 2}, random.Random(4), config) is None
