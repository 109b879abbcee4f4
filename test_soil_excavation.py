#!/usr/bin/env python3
"""
Test the standalone soil excavation calculator.
"""

import sys
sys.path.insert(0, 'src')

import pytest

from estimator import (
    Carrier,
    EstimationCatalog,
    Excavation,
    SoilExcavationCalculator,
    SoilExcavationInput,
    TaskTemplate,
)


def dig_catalog():
    return EstimationCatalog(
        templates=[TaskTemplate("x1", "Excavation soil with Digger (3t)", "tonnes", 0.1)],
        excavators=[Carrier("e1", "Digger", 3.0)],
        carriers=[Carrier("d1", "Dumper", 1.0, 4000)],
    )


def test_dig_out_from_dimensions():
    result = SoilExcavationCalculator(dig_catalog()).calculate(SoilExcavationInput(
        excavation=Excavation(excavator_id="e1", carrier_id="d1"),
        length=4, width=2.5, depth_cm=20, distance=20))
    assert result.name == "Soil Excavation"
    assert result.amount == pytest.approx(3.0)
    assert result.materials[0].name == "Soil"

    excavation, transport = result.task_breakdown
    assert excavation.task == "Excavation"
    assert excavation.hours == pytest.approx(0.3)
    assert excavation.event_task_id == "x1"
    # Three 1 t trips of 40 m at 4000 m/h
    assert transport.task == "Transport"
    assert transport.hours == pytest.approx(0.03)


def test_direct_tonnage_without_carrier():
    result = SoilExcavationCalculator(dig_catalog()).calculate(SoilExcavationInput(
        excavation=Excavation(excavator=Carrier("e1", "Digger", 3.0)), tons="5"))
    assert [e.task for e in result.task_breakdown] == ["Excavation"]
    assert result.total_hours == pytest.approx(0.5)


def test_soil_excavation_validation():
    calculator = SoilExcavationCalculator(dig_catalog())
    assert calculator.validate(SoilExcavationInput(excavation=Excavation(), tons=5)) == [
        "Select an excavator"
    ]
    assert calculator.validate(SoilExcavationInput(
        excavation=Excavation(excavator_id="e1"))) == ["Enter a tonnage or valid dimensions"]
    big = Carrier("e2", "Digger", 8.0)
    assert calculator.validate(SoilExcavationInput(excavation=Excavation(excavator=big), tons=5)) == [
        "Excavation template not found for Digger (8t)"
    ]
