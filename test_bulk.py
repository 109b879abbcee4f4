#!/usr/bin/env python3
"""
Test sand, aggregate, mortar and type 1 calculators, plus the
excavator and compactor tables they use.
"""

import sys
sys.path.insert(0, 'src')

import pytest

from estimator import (
    COMPACTORS,
    AggregateCalculator,
    AggregateInput,
    Carrier,
    CompactedMaterial,
    EstimationCatalog,
    MortarCalculator,
    MortarInput,
    MortarMode,
    SandCalculator,
    SandInput,
    TaskTemplate,
    TransportOptions,
    Type1Calculator,
    Type1Input,
    compacting_time,
)
from estimator.compacting import total_compacting_hours
from estimator.equipment import digger_loading_rate, loading_sand_hours_per_tonne


def test_sand_delivery():
    result = SandCalculator(EstimationCatalog()).calculate(
        SandInput(length=2, width=3, height_mm=50))
    assert result.name == "Sand Delivery"
    assert result.amount == pytest.approx(0.3)
    assert result.materials[0].name == "Grid Sand"
    assert result.materials[0].amount == pytest.approx(0.48)
    assert result.task_breakdown == ()


def test_sand_transport():
    result = SandCalculator(EstimationCatalog()).calculate(
        SandInput(length=2, width=3, height_mm=50, transport=TransportOptions(carrier_size=1)))
    entry = result.task_breakdown[0]
    assert entry.task == "transport grid sand"
    assert entry.hours == pytest.approx(60 / 4000)


def test_sand_rejects_unknown_material():
    calculator = SandCalculator(EstimationCatalog())
    request = SandInput(length=2, width=3, height_mm=50, material="Gold")
    assert calculator.validate(request) == ["Unknown material: Gold"]
    assert calculator.calculate(request) is None


def test_aggregate():
    result = AggregateCalculator(EstimationCatalog()).calculate(
        AggregateInput(length=2, width=3, depth_cm=10))
    assert result.amount == 6
    assert result.unit == "square meters"
    assert result.materials[0].amount == pytest.approx(1.26)


def test_mortar_for_slab_bed():
    result = MortarCalculator(EstimationCatalog()).calculate(
        MortarInput(mode=MortarMode.SLAB, area=10))
    materials = {m.name: m for m in result.materials}
    assert result.amount == pytest.approx(0.3)
    assert materials["Cement"].amount == 5
    assert materials["Sand"].amount == pytest.approx(360.0)
    assert materials["Sand"].unit == "kg"


def test_mortar_general_with_mixing():
    catalog = EstimationCatalog(templates=[TaskTemplate("m", "mixing mortar", "batch", 0.1)])
    result = MortarCalculator(catalog).calculate(
        MortarInput(length=2, width=1, thickness_cm=10))
    materials = {m.name: m.amount for m in result.materials}
    assert materials["Cement"] == 4
    assert materials["Sand"] == pytest.approx(270.0)
    # 100 kg cement and 270 kg sand make three 125 kg batches
    assert result.task_breakdown[0].hours == pytest.approx(0.3)


def test_mortar_needs_positive_dimensions():
    calculator = MortarCalculator(EstimationCatalog())
    assert calculator.calculate(MortarInput(mode=MortarMode.SLAB, area=0)) is None


def digger():
    return Carrier("e1", "Digger", 3.0)


def test_type1_from_dimensions():
    result = Type1Calculator(EstimationCatalog()).calculate(Type1Input(
        depth_cm=10, length=4, width=2.5, excavator=digger(),
        compactor_id="small_compactor", transport=TransportOptions(carrier_size=1)))
    assert result.amount == pytest.approx(2.3)
    entries = {e.task: e for e in result.task_breakdown}
    assert entries["Preparation"].hours == pytest.approx(2.3 / 8.33)
    assert entries["Transport"].hours == pytest.approx(3 * 60 / 4000)
    assert entries["Compacting with small compactor"].hours == pytest.approx(10 * 1.2 / 27.5 * 3)
    assert result.materials[0].name == "Type 1 Aggregate"


def test_type1_direct_tonnage_without_area_skips_compacting():
    result = Type1Calculator(EstimationCatalog()).calculate(Type1Input(
        depth_cm=10, tons=5, excavator=digger(), compactor_id="small_compactor"))
    assert [e.task for e in result.task_breakdown] == ["Preparation"]
    assert result.amount == 5


def test_type1_validation():
    calculator = Type1Calculator(EstimationCatalog())
    errors = calculator.validate(Type1Input(depth_cm=10, tons=5))
    assert "Select an excavator" in errors
    assert "Select a compactor" in errors
    assert calculator.validate(Type1Input(depth_cm=10, tons=5, excavator=digger(),
                                          compactor_id="big_roller"))


def test_excavator_brackets():
    assert digger_loading_rate(3) == 8.33
    assert digger_loading_rate(4.5) == 8.33
    assert digger_loading_rate(0) == 2
    assert digger_loading_rate(50) == 100
    assert loading_sand_hours_per_tonne(0.5) == 0.5
    assert loading_sand_hours_per_tonne(3) == 0.08


def test_compacting_layers_and_passes():
    estimate = compacting_time(COMPACTORS["medium_compactor"], 10, CompactedMaterial.SAND)
    assert estimate.layers == 2
    assert estimate.passes == 3
    assert estimate.hours_per_m2 == pytest.approx(1 / 45)


def test_total_compacting_hours():
    hours = total_compacting_hours(10, COMPACTORS["small_compactor"], 10, CompactedMaterial.SAND)
    assert hours == pytest.approx(10 / 27.5 * 3)


def test_type1_excavator_from_catalog():
    calculator = Type1Calculator(EstimationCatalog(excavators=[digger()]))
    result = calculator.calculate(Type1Input(depth_cm=10, tons=5, excavator_id="e1",
                                             compactor_id="small_compactor"))
    assert result.task_breakdown[0].hours == pytest.approx(5 / 8.33)
    errors = calculator.validate(Type1Input(depth_cm=10, tons=5, excavator_id="e9",
                                            compactor_id="small_compactor"))
    assert errors == ["Selected excavator not found (ID: e9)"]
