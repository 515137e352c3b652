# tests/test_tier_catalog.py
from __future__ import annotations

import pytest

from functions.orchestrator.tier_catalog import ScaleDirection, StepKind, TierCatalog, TierStep

TIERS = ["M10", "M20", "M30", "M40", "M50", "M60", "M80", "M200"]


@pytest.mark.parametrize("index", range(len(TIERS)))
def test_up_moves_one_step_or_hits_top_boundary(catalog: TierCatalog, index: int) -> None:
    step = catalog.next_tier(TIERS[index], ScaleDirection.UP)
    if index < len(TIERS) - 1:
        assert step == TierStep(StepKind.NEXT, TIERS[index + 1])
    else:
        assert step.kind is StepKind.AT_BOUNDARY
        assert step.tier is None


@pytest.mark.parametrize("index", range(len(TIERS)))
def test_down_moves_one_step_or_hits_bottom_boundary(catalog: TierCatalog, index: int) -> None:
    step = catalog.next_tier(TIERS[index], ScaleDirection.DOWN)
    if index > 0:
        assert step == TierStep(StepKind.NEXT, TIERS[index - 1])
    else:
        assert step.kind is StepKind.AT_BOUNDARY


@pytest.mark.parametrize("unknown", ["M25", "m30", "", " M30", "M30 ", "M2000", "Free"])
@pytest.mark.parametrize("direction", list(ScaleDirection))
def test_unknown_tier_is_not_found_never_raises(catalog: TierCatalog, unknown: str, direction: ScaleDirection) -> None:
    step = catalog.next_tier(unknown, direction)
    assert step.kind is StepKind.NOT_FOUND
    assert not step.is_next


def test_not_found_is_distinct_from_boundary(catalog: TierCatalog) -> None:
    assert catalog.next_tier("M200", "up").kind is StepKind.AT_BOUNDARY
    assert catalog.next_tier("M300", "up").kind is StepKind.NOT_FOUND


def test_plain_string_directions_are_accepted(catalog: TierCatalog) -> None:
    assert catalog.next_tier("M30", "up").tier == "M40"
    assert catalog.next_tier("M30", "down").tier == "M20"


@pytest.mark.parametrize("direction", ["sideways", "UP", "", None])
def test_unknown_direction_raises_instead_of_reporting_not_found(catalog: TierCatalog, direction) -> None:
    with pytest.raises(ValueError):
        catalog.next_tier("M30", direction)


def test_only_next_steps_carry_a_tier(catalog: TierCatalog) -> None:
    assert catalog.next_tier("M30", ScaleDirection.UP).is_next
    assert not catalog.next_tier("M200", ScaleDirection.UP).is_next
    assert not catalog.next_tier("M35", ScaleDirection.UP).is_next


def test_up_then_down_returns_to_origin(catalog: TierCatalog) -> None:
    for tier in TIERS[:-1]:
        up = catalog.next_tier(tier, ScaleDirection.UP)
        assert catalog.next_tier(up.tier, ScaleDirection.DOWN).tier == tier

    for tier in TIERS[1:]:
        down = catalog.next_tier(tier, ScaleDirection.DOWN)
        assert catalog.next_tier(down.tier, ScaleDirection.UP).tier == tier


def test_custom_catalog_is_respected() -> None:
    small = TierCatalog.from_names(["A", "B"])
    assert small.next_tier("A", "up").tier == "B"
    assert small.next_tier("B", "up").kind is StepKind.AT_BOUNDARY
    assert "M30" not in small
    assert len(small) == 2


def test_single_tier_catalog_is_a_boundary_both_ways() -> None:
    only = TierCatalog.from_names(["M10"])
    assert only.next_tier("M10", "up").kind is StepKind.AT_BOUNDARY
    assert only.next_tier("M10", "down").kind is StepKind.AT_BOUNDARY


@pytest.mark.parametrize("names", [[], ["M10", "M10"], ["M10", " "]])
def test_invalid_catalog_is_rejected(names: list) -> None:
    with pytest.raises(ValueError):
        TierCatalog.from_names(names)


def test_catalog_is_immutable(catalog: TierCatalog) -> None:
    with pytest.raises(AttributeError):
        catalog.tiers = ("X",)  # type: ignore[misc]
