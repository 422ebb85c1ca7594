from salvo.ai.fleet_tracker import FleetState, track_fleet
from salvo.core.models import STANDARD_FLEET


def test_fresh_fleet_is_conserved() -> None:
    state = FleetState.fresh()
    assert state.remaining == STANDARD_FLEET
    assert state.sunk == ()
    assert state.is_conserved()
    assert sum(state.remaining) == 17


def test_sunk_delta_moves_matching_length(make_grid) -> None:
    state = FleetState.fresh()
    grid = make_grid(r0="###o......", r5="....x.....")
    state, issues = track_fleet(state, grid)
    assert not issues
    assert state.remaining == (5, 4, 3, 2)
    assert state.sunk == (3,)
    assert state.sunk_count == 3
    assert len(state.hits) == 1
    assert state.is_conserved()

    grid = make_grid(r0="###o......", r5="....x.....", r8="#####.....")
    state, issues = track_fleet(state, grid)
    assert not issues
    assert state.remaining == (4, 3, 2)
    assert state.sunk == (5, 3)
    assert state.is_conserved()


def test_repeated_observation_is_idempotent(make_grid) -> None:
    grid = make_grid(r0="##o.......")
    state, _ = track_fleet(FleetState.fresh(), grid)
    again, issues = track_fleet(state, grid)
    assert not issues
    assert again == state


def test_unmatched_delta_is_surfaced_without_moving(make_grid) -> None:
    grid = make_grid(r0="#.........")
    state, issues = track_fleet(FleetState.fresh(), grid)
    assert [issue.kind for issue in issues] == ["unmatched_sunk_delta"]
    assert state.remaining == STANDARD_FLEET
    assert state.is_conserved()
    # The observed count is re-synchronised so the same board is not re-reported.
    _, issues = track_fleet(state, grid)
    assert not issues


def test_simultaneous_sinks_are_split_by_component(make_grid) -> None:
    grid = make_grid(r0="##.###....")
    state, issues = track_fleet(FleetState.fresh(), grid)
    assert [issue.kind for issue in issues] == ["multi_sink"]
    assert state.sunk == (3, 2)
    assert state.remaining == (5, 4, 3)
    assert state.is_conserved()


def test_pristine_grid_resets_progress(make_grid, empty_grid) -> None:
    state, _ = track_fleet(FleetState.fresh(), make_grid(r0="##o.......", r4="..x......."))
    assert state.has_progress
    state, issues = track_fleet(state, empty_grid)
    assert not issues
    assert state == FleetState.fresh()


def test_shrinking_sunk_count_is_surfaced(make_grid) -> None:
    state, _ = track_fleet(FleetState.fresh(), make_grid(r0="##o.......", r3="###o......"))
    state, issues = track_fleet(state, make_grid(r0="##o......."))
    assert [issue.kind for issue in issues] == ["sunk_count_decreased"]
    assert state.sunk == (3, 2)
    assert state.is_conserved()
