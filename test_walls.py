#!/usr/bin/env python3
"""
Test brick, block and sleeper walls plus foundation excavation.
"""

import sys
sys.path.insert(0, 'src')

import pytest

from estimator import (
    DiggingMethod,
    EstimationCatalog,
    FoundationCalculator,
    FoundationInput,
    LayingMethod,
    PostMethod,
    SleeperWallCalculator,
    SleeperWallInput,
    SoilType,
    TaskTemplate,
    TransportOptions,
    WallCalculator,
    WallInput,
    WallType,
)


def wall_catalog():
    return EstimationCatalog(templates=[
        TaskTemplate("t1", "Bricklaying (standard)", "pieces", 0.02),
        TaskTemplate("t2", "preparing for the wall (leveling)", "running meters", 0.5),
        TaskTemplate("t3", "mixing mortar", "batch", 0.1),
        TaskTemplate("t4", "Building a 4-inch block wall standing", "pieces", 0.1),
    ])


def by_name(items):
    return {item.name: item for item in items}


def test_brick_wall_units():
    result = WallCalculator(EstimationCatalog()).calculate(WallInput(length="4", height=1))
    assert result.name == "Brick Wall"
    assert result.amount == 270
    assert result.details["rows"] == pytest.approx(14.29)
    assert result.details["units_per_row"] == 18


def test_brick_wall_mortar_split():
    result = WallCalculator(EstimationCatalog()).calculate(WallInput(length=4, height=1))
    materials = by_name(result.materials)
    assert materials["Bricks"].amount == 270
    assert materials["Cement"].amount == 1
    assert materials["Sand"].amount == pytest.approx(0.09)


def test_brick_wall_labour_in_order():
    result = WallCalculator(wall_catalog()).calculate(WallInput(length=4, height=1))
    tasks = [entry.task for entry in result.task_breakdown]
    assert tasks == ["Bricklaying (standard)", "preparing for the wall (leveling)", "mixing mortar"]
    hours = [entry.hours for entry in result.task_breakdown]
    assert hours == pytest.approx([5.4, 2.0, 0.1])
    assert result.total_hours == pytest.approx(7.5)


def test_total_hours_is_sum_of_entries():
    result = WallCalculator(wall_catalog()).calculate(
        WallInput(length=6, height=1.2, transport=TransportOptions()))
    assert result.total_hours == pytest.approx(sum(e.hours for e in result.task_breakdown))
    assert result.to_dict()["hours_worked"] == result.total_hours


def test_missing_laying_template_omits_only_that_entry():
    catalog = EstimationCatalog(templates=[
        TaskTemplate("t3", "mixing mortar", "batch", 0.1),
    ])
    result = WallCalculator(catalog).calculate(WallInput(length=4, height=1))
    assert [e.task for e in result.task_breakdown] == ["mixing mortar"]
    assert result.warnings


def test_openings_are_deducted():
    result = WallCalculator(EstimationCatalog()).calculate(
        WallInput(length=4, height=1, openings=1))
    # 1 m² holds 63.5 bricks; the deduction rounds down
    assert result.details["opening_deduction"] == 63
    assert result.amount == 207


def test_block_wall():
    result = WallCalculator(wall_catalog()).calculate(
        WallInput(length=4.4, height=1, wall_type=WallType.BLOCK4))
    assert result.name == "4-inch Block Wall"
    assert result.amount == 50
    assert by_name(result.materials)["4-inch blocks"].amount == 50
    assert result.task_breakdown[0].task == "Building a 4-inch block wall standing"
    assert result.task_breakdown[0].hours == pytest.approx(5.0)


def test_flat_blocks_need_more_courses():
    standing = WallCalculator(EstimationCatalog()).calculate(
        WallInput(length=4.4, height=1, wall_type=WallType.BLOCK7))
    flat = WallCalculator(EstimationCatalog()).calculate(
        WallInput(length=4.4, height=1, wall_type=WallType.BLOCK7, laying_method=LayingMethod.FLAT))
    assert flat.amount > standing.amount


def test_brick_transport():
    result = WallCalculator(EstimationCatalog()).calculate(
        WallInput(length=4, height=1, transport=TransportOptions(carrier_size=0.125, distance=30)))
    entries = {e.task: e for e in result.task_breakdown}
    assert set(entries) == {"transport bricks", "transport sand", "transport cement"}
    # 270 bricks at 41 per barrow is 7 trips of 0.04 h
    assert entries["transport bricks"].hours == pytest.approx(0.28)
    assert entries["transport bricks"].normalized_hours == pytest.approx(0.28)
    assert entries["transport cement"].hours == pytest.approx(0.04)


def test_invalid_wall_returns_nothing():
    calculator = WallCalculator(EstimationCatalog())
    request = WallInput(length="abc", height=1)
    assert calculator.validate(request) == ["Wall length must be a number"]
    assert calculator.calculate(request) is None


def test_wall_with_foundation():
    catalog = wall_catalog()
    result = WallCalculator(catalog).calculate(WallInput(
        length=4, height=1,
        foundation=FoundationInput(length=4, width=0.6, depth_cm=60)))
    tasks = [e.task for e in result.task_breakdown]
    assert "preparing for the wall (leveling)" not in tasks
    assert tasks[-1] == "Excavating foundation with shovel"
    assert "Excavated Clay Soil (loose volume)" in by_name(result.materials)


def test_sleeper_wall_through_wall_calculator():
    result = WallCalculator(EstimationCatalog()).calculate(
        WallInput(length=4.8, height=0.6, wall_type=WallType.SLEEPER))
    assert result.name == "Sleeper Wall"
    materials = by_name(result.materials)
    assert materials["Sleeper"].amount == 6
    assert materials["Post"].amount == 3
    assert materials["Postmix"].amount == 10
    assert result.details["total_posts"] == 5


def test_sleeper_wall_direct_posts_use_no_postmix():
    catalog = EstimationCatalog(templates=[
        TaskTemplate("s1", "Sleeper wall 1st layer", "sleepers", 0.5),
        TaskTemplate("s2", "Sleeper wall on top of 1st layer", "sleepers", 0.25),
        TaskTemplate("s3", "digging holes for posts", "holes", 0.3),
        TaskTemplate("s4", "setting up posts", "posts", 0.2),
    ])
    result = SleeperWallCalculator(catalog).calculate(
        SleeperWallInput(length=4.8, height=0.6, post_method=PostMethod.DIRECT))
    assert "Postmix" not in by_name(result.materials)
    tasks = {e.task: e.hours for e in result.task_breakdown}
    assert "digging holes for posts" not in tasks
    assert tasks["Sleeper wall 1st layer"] == pytest.approx(1.0)
    assert tasks["Sleeper wall on top of 1st layer"] == pytest.approx(1.0)
    assert tasks["setting up posts"] == pytest.approx(1.0)


def test_foundation_without_template_uses_multiplier():
    result = FoundationCalculator(EstimationCatalog()).calculate(
        FoundationInput(length=15, width=0.6, depth_cm=60))
    assert result.amount == pytest.approx(5.4)
    assert result.total_hours == pytest.approx(12.0)
    assert result.warnings

    medium = FoundationCalculator(EstimationCatalog()).calculate(FoundationInput(
        length=15, width=0.6, depth_cm=60, digging_method=DiggingMethod.MEDIUM))
    assert medium.total_hours == pytest.approx(1.0)


def test_foundation_with_template_rate():
    catalog = EstimationCatalog(templates=[
        TaskTemplate("f1", "Excavating foundation with shovel", "cubic meters", 0.5),
    ])
    result = FoundationCalculator(catalog).calculate(
        FoundationInput(length=15, width=0.6, depth_cm=60))
    assert result.total_hours == pytest.approx(6.0)
    assert result.task_breakdown[0].event_task_id == "f1"


def test_foundation_spoil():
    result = FoundationCalculator(EstimationCatalog()).calculate(
        FoundationInput(length=15, width=0.6, depth_cm=60, soil_type=SoilType.CLAY))
    materials = by_name(result.materials)
    assert materials["Excavated Clay Soil (loose volume)"].amount == pytest.approx(9.72)
    assert materials["Aggregate (for concrete)"].amount == pytest.approx(5.67)


def test_foundation_rejects_zero_depth():
    calculator = FoundationCalculator(EstimationCatalog())
    assert calculator.calculate(FoundationInput(length=5, width=0.6, depth_cm=0)) is None
