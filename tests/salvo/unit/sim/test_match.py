import random
import statistics

from salvo.core.models import TargetingMode, WeaponKind
from salvo.sim.match import play_match


def test_match_is_won_within_turn_cap() -> None:
    result = play_match(random.Random(21))
    assert result.won
    assert result.turns <= 100
    assert sum(result.shots.values()) == result.turns
    assert result.modes[TargetingMode.HUNT] > 0
    assert result.modes[TargetingMode.TARGET] > 0


def test_single_shot_only_match() -> None:
    result = play_match(random.Random(22), inventory={})
    assert result.won
    assert set(result.shots) == {WeaponKind.SINGLE}
    assert result.turns >= 17


def test_engine_beats_random_play_on_average() -> None:
    turns = [play_match(random.Random(seed), inventory={}).turns for seed in range(5)]
    assert statistics.fmean(turns) < 75


def test_turn_cap_stops_match() -> None:
    result = play_match(random.Random(23), inventory={}, max_turns=5)
    assert not result.won
    assert result.turns == 5
