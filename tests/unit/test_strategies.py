from __future__ import annotations

import pytest
from domain.assignment import (
    AssignmentContext,
    LeastOpenStrategy,
    ManualStrategy,
    RoundRobinStrategy,
)
from domain.types import AgentCandidate


def _ctx(
    cands: list[tuple[str, int]],
    loads: dict[str, int] | None = None,
    last: str | None = None,
) -> AssignmentContext:
    return AssignmentContext.build(
        "t1",
        None,
        last,
        [AgentCandidate(uid, mx) for uid, mx in cands],
        loads,
    )


def _pick(strategy, ctx) -> str | None:
    c = strategy.select(ctx)
    return c.user_id if c is not None else None


# --- round robin ----------------------------------------------------------------


def test_rr_advances_past_last_agent():
    ctx = _ctx([("A", 3), ("B", 3), ("C", 3)], last="B")
    assert _pick(RoundRobinStrategy(), ctx) == "C"


def test_rr_wraps_after_last_position():
    ctx = _ctx([("A", 3), ("B", 3), ("C", 3)], last="C")
    assert _pick(RoundRobinStrategy(), ctx) == "A"


def test_rr_skips_exhausted_first_candidate():
    ctx = _ctx([("A", 1), ("B", 1)], loads={"A": 1, "B": 0})
    assert _pick(RoundRobinStrategy(), ctx) == "B"


def test_rr_unknown_or_blank_cursor_starts_at_zero():
    cands = [("A", 1), ("B", 1)]
    assert _pick(RoundRobinStrategy(), _ctx(cands, last="ghost")) == "A"
    assert _pick(RoundRobinStrategy(), _ctx(cands, last="   ")) == "A"


def test_rr_is_not_load_balanced():
    # B is far busier than C but still has room; rotation wins
    ctx = _ctx([("A", 10), ("B", 10), ("C", 10)], loads={"B": 9, "C": 0}, last="A")
    assert _pick(RoundRobinStrategy(), ctx) == "B"


def test_rr_all_full_returns_none():
    ctx = _ctx([("A", 1), ("B", 2)], loads={"A": 1, "B": 2}, last="A")
    assert RoundRobinStrategy().select(ctx) is None


def test_rr_zero_capacity_is_never_eligible():
    ctx = _ctx([("A", 0), ("B", 0)])
    assert RoundRobinStrategy().select(ctx) is None


def test_rr_duplicate_ids_use_first_match_as_cursor():
    # [A, B, A]: cursor "A" resolves to index 0, so B comes next
    ctx = _ctx([("A", 2), ("B", 2), ("A", 2)], last="A")
    assert _pick(RoundRobinStrategy(), ctx) == "B"


# --- least open -----------------------------------------------------------------


def test_lo_prefers_least_loaded_first_in_tie():
    ctx = _ctx([("A", 5), ("B", 5), ("C", 5)], loads={"A": 2, "B": 1, "C": 1})
    assert _pick(LeastOpenStrategy(), ctx) == "B"


def test_lo_rotates_within_tie_set():
    ctx = _ctx([("A", 5), ("B", 5), ("C", 5)], loads={"A": 2, "B": 1, "C": 1}, last="B")
    assert _pick(LeastOpenStrategy(), ctx) == "C"


def test_lo_rotation_wraps_within_tie_set():
    ctx = _ctx([("A", 5), ("B", 5), ("C", 5)], loads={"A": 2, "B": 1, "C": 1}, last="C")
    assert _pick(LeastOpenStrategy(), ctx) == "B"


def test_lo_cursor_outside_tie_set_resets_to_first():
    # last agent A is busier than the tie set, so rotation memory is lost
    ctx = _ctx([("A", 5), ("B", 5), ("C", 5)], loads={"A": 2, "B": 1, "C": 1}, last="A")
    assert _pick(LeastOpenStrategy(), ctx) == "B"


def test_lo_ignores_full_candidates_even_with_lower_load():
    # A has 0 active but 0 capacity; B is the only eligible one
    ctx = _ctx([("A", 0), ("B", 3)], loads={"B": 2})
    assert _pick(LeastOpenStrategy(), ctx) == "B"


def test_lo_missing_loads_mean_zero():
    ctx = _ctx([("A", 2), ("B", 2)], loads=None, last="A")
    assert _pick(LeastOpenStrategy(), ctx) == "B"


def test_lo_all_full_returns_none():
    ctx = _ctx([("A", 1), ("B", 1)], loads={"A": 1, "B": 5})
    assert LeastOpenStrategy().select(ctx) is None


# --- manual ---------------------------------------------------------------------


def test_manual_never_assigns():
    ctx = _ctx([("A", 5), ("B", 5)])
    assert ManualStrategy().select(ctx) is None
    assert ManualStrategy().select(None) is None


# --- shared contract ------------------------------------------------------------


@pytest.mark.parametrize("strategy", [RoundRobinStrategy(), LeastOpenStrategy(), ManualStrategy()])
def test_none_and_empty_inputs_return_none(strategy):
    assert strategy.select(None) is None
    assert strategy.select(_ctx([])) is None


@pytest.mark.parametrize("strategy", [RoundRobinStrategy(), LeastOpenStrategy()])
def test_someone_with_capacity_is_always_found(strategy):
    # every rotation position, with exactly one agent left under capacity
    cands = [("A", 2), ("B", 2), ("C", 2), ("D", 2)]
    for free in "ABCD":
        loads = {uid: (0 if uid == free else 2) for uid, _ in cands}
        for last in [None, "A", "B", "C", "D"]:
            assert _pick(strategy, _ctx(cands, loads=loads, last=last)) == free


@pytest.mark.parametrize("strategy", [RoundRobinStrategy(), LeastOpenStrategy(), ManualStrategy()])
def test_select_is_pure(strategy):
    ctx = _ctx([("A", 3), ("B", 3), ("C", 3)], loads={"A": 1, "B": 0, "C": 2}, last="A")
    first = strategy.select(ctx)
    for _ in range(5):
        assert strategy.select(ctx) == first
    # context untouched
    assert dict(ctx.active_loads or {}) == {"A": 1, "B": 0, "C": 2}
    assert [c.user_id for c in ctx.candidates] == ["A", "B", "C"]
