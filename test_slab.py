#!/usr/bin/env python3
"""
Test the paving slab calculator.
"""

import sys
sys.path.insert(0, 'src')

import pytest

from estimator import (
    Carrier,
    EstimationCatalog,
    Excavation,
    SlabCalculator,
    SlabInput,
    TaskTemplate,
    TransportOptions,
)


def slab_catalog(**kwargs):
    templates = [
        TaskTemplate("s1", "Porcelain slab 600x600", "m2", 0.5),
        TaskTemplate("s2", "Sandstone paving 900x600", "m2", 0.6),
        TaskTemplate("c1", "cutting porcelain", "slabs", 0.1),
        TaskTemplate("g1", "Grouting slabs", "m2", 0.05),
        TaskTemplate("l1", "final leveling (type 1)", "m2", 0.02),
        TaskTemplate("m1", "mixing mortar", "batch", 0.1),
        TaskTemplate("x1", "Excavation soil with Digger (3t)", "tonnes", 0.1),
    ]
    return EstimationCatalog(templates=templates, **kwargs)


def porcelain(**overrides):
    values = dict(area=10, type1_thickness_cm=10, mortar_thickness_cm=4, slab_type_id="s1",
                  cut_slabs=5, grouting_id="g1", compactor_id="medium_compactor")
    values.update(overrides)
    return SlabInput(**values)


def test_slab_materials():
    result = SlabCalculator(slab_catalog()).calculate(porcelain())
    materials = {m.name: m.amount for m in result.materials}
    assert materials["Soil excavation"] == pytest.approx(2.4)
    assert materials["tape1"] == pytest.approx(2.1)
    assert materials["Sand"] == pytest.approx(0.77)
    assert materials["Cement"] == 7
    assert result.name == "Porcelain slab 600x600"
    assert result.amount == 10
    assert result.unit == "square meters"


def test_slab_tasks_in_order():
    result = SlabCalculator(slab_catalog()).calculate(porcelain())
    tasks = [(e.task, e.hours) for e in result.task_breakdown]
    assert [name for name, _ in tasks] == [
        "Porcelain slab 600x600",
        "cutting porcelain",
        "Grouting slabs",
        "Primer coating (slab backs)",
        "Compacting with medium compactor",
        "final leveling (type 1)",
        "mixing mortar",
    ]
    assert [hours for _, hours in tasks] == pytest.approx([5.0, 0.5, 0.5, 28 / 60, 0.8, 0.2, 0.8])
    assert result.total_hours == pytest.approx(sum(hours for _, hours in tasks))


def test_mix_ratio_from_catalog_changes_cement():
    default = SlabCalculator(slab_catalog()).calculate(porcelain())
    richer = SlabCalculator(slab_catalog(mix_ratios={"slab": "1:3"})).calculate(porcelain())
    cement = lambda r: next(m.amount for m in r.materials if m.name == "Cement")
    assert cement(richer) > cement(default)


def test_sandstone_cutting_fallback():
    catalog = slab_catalog()
    catalog.templates = [t for t in catalog.templates if t.id != "c1"]
    result = SlabCalculator(catalog).calculate(porcelain(slab_type_id="s2", grouting_id=None))
    cutting = [e for e in result.task_breakdown if e.task.startswith("cutting")]
    assert len(cutting) == 1
    assert cutting[0].task == "cutting sandstones"
    assert cutting[0].hours == pytest.approx(20 / 60)
    assert any("cutting sandstones" in w for w in result.warnings)


def test_missing_grouting_template_is_reported():
    result = SlabCalculator(slab_catalog()).calculate(porcelain(grouting_id="nope"))
    assert "Grouting method nope not found" in result.warnings
    assert all(e.task != "Grouting slabs" for e in result.task_breakdown)


def test_no_cuts_no_cutting_task():
    result = SlabCalculator(slab_catalog()).calculate(porcelain(cut_slabs=0))
    assert all(not e.task.startswith("cutting") for e in result.task_breakdown)


def test_excavation_tasks():
    excavation = Excavation(
        excavator=Carrier("e1", "Digger", 3.0),
        carrier=Carrier("d1", "Dumper", 1.0, 4000),
        soil_distance=20,
    )
    result = SlabCalculator(slab_catalog()).calculate(porcelain(excavation=excavation))
    entries = {e.task: e for e in result.task_breakdown}
    assert entries["Soil excavation"].hours == pytest.approx(0.24)
    assert entries["Soil excavation"].event_task_id == "x1"
    assert entries["Loading sand"].hours == pytest.approx(0.08 * 0.768)
    assert entries["Transporting soil (20m)"].hours == pytest.approx(0.03)
    assert "Loading tape1" not in entries
    assert any("Tape1 loading template not found" in w for w in result.warnings)


def test_transport_entries():
    result = SlabCalculator(slab_catalog()).calculate(
        porcelain(transport=TransportOptions(carrier_size=0.5, distance=30)))
    entries = {e.task: e for e in result.task_breakdown}
    # 20 slabs at 10 per trip
    assert entries["transport slabs"].hours == pytest.approx(2 * 0.06)
    assert entries["transport slabs"].amount == 20
    assert "transport sand" in entries
    assert "transport cement" in entries


def test_validation_messages():
    calculator = SlabCalculator(slab_catalog())
    assert calculator.validate(porcelain(slab_type_id="missing")) == [
        "Selected slab type not found (ID: missing)"
    ]
    assert "Select a slab type" in calculator.validate(porcelain(slab_type_id=None))
    assert "Enter the slab area" in calculator.validate(porcelain(area=""))
    assert calculator.calculate(porcelain(area="")) is None


def test_same_inputs_give_identical_results():
    catalog = slab_catalog(mix_ratios={"slab": "1:4"})
    request = porcelain(transport=TransportOptions(carrier_size=0.5, distance=25))
    assert SlabCalculator(catalog).calculate(request) == SlabCalculator(catalog).calculate(request)


def test_slab_named_with_zero_size_counts_default_slabs():
    catalog = slab_catalog()
    catalog.templates.append(TaskTemplate("z1", "Slab 0x600", "m2", 0.5))
    result = SlabCalculator(catalog).calculate(porcelain(slab_type_id="z1"))
    # 10 m² at the 0.36 m² default slab
    assert result.details["slab_count"] == 28


def test_excavation_equipment_from_catalog_ids():
    catalog = slab_catalog(
        excavators=[Carrier("e1", "Digger", 3.0)],
        carriers=[Carrier("d1", "Dumper", 1.0, 4000)],
    )
    excavation = Excavation(excavator_id="e1", carrier_id="d1", soil_distance=20)
    result = SlabCalculator(catalog).calculate(porcelain(excavation=excavation))
    entries = {e.task: e for e in result.task_breakdown}
    assert entries["Soil excavation"].hours == pytest.approx(0.24)
    assert entries["Transporting soil (20m)"].hours == pytest.approx(0.03)


def test_unknown_excavator_id_is_rejected():
    calculator = SlabCalculator(slab_catalog())
    request = porcelain(excavation=Excavation(excavator_id="nope"))
    assert calculator.validate(request) == ["Selected excavator not found (ID: nope)"]
    assert calculator.calculate(request) is None
