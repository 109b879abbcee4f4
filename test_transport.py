#!/usr/bin/env python3
"""
Test the shared transport time model.
"""

import sys
sys.path.insert(0, 'src')

import logging
import math

import pytest

from estimator import (
    Carrier,
    EstimationCatalog,
    TransportOptions,
    estimate_carry_on_foot,
    estimate_transport,
    normalize_to_reference,
)
from estimator.transport import resolve_transport


def test_fifty_slabs_by_half_tonne_dumper():
    estimate = estimate_transport(50, 0.5, "slabs", 30)
    assert estimate.trips == 5
    assert estimate.time_per_trip == pytest.approx(0.06)
    assert estimate.total_hours == pytest.approx(0.3)
    assert estimate.normalized_hours == pytest.approx(0.3)
    assert estimate.warnings == []


def test_normalized_time_rescales_to_thirty_metres():
    estimate = estimate_transport(50, 0.5, "slabs", 60)
    assert estimate.total_hours == pytest.approx(0.6)
    assert estimate.normalized_hours == pytest.approx(0.3)


def test_more_quantity_or_distance_never_takes_less_time():
    base = estimate_transport(100, 0.125, "bricks", 30).total_hours
    assert estimate_transport(200, 0.125, "bricks", 30).total_hours >= base
    assert estimate_transport(100, 0.125, "bricks", 45).total_hours >= base


def test_partial_load_still_needs_a_trip():
    estimate = estimate_transport(0.3, 1, "sand", 30)
    assert estimate.trips == 1
    assert estimate.total_hours == pytest.approx(60 / 4000)


def test_zero_distance_takes_no_time():
    estimate = estimate_transport(10, 1, "sand", 0)
    assert estimate.total_hours == 0
    assert math.isnan(estimate.normalized_hours)


def test_normalize_with_zero_distance_and_positive_hours():
    assert math.isinf(normalize_to_reference(1.0, 0))


def test_unknown_material_is_reported():
    estimate = estimate_transport(3, 0.125, "timber", 30)
    assert estimate.trips == 3
    assert len(estimate.warnings) == 1
    assert "timber" in estimate.warnings[0]


def test_carry_on_foot():
    estimate = estimate_carry_on_foot(10, 30)
    assert estimate.trips == 10
    assert estimate.total_hours == pytest.approx(0.4)


def test_resolve_transport_defaults():
    assert resolve_transport(TransportOptions()) == (0.125, 30.0)
    assert resolve_transport(TransportOptions(carrier_size=1, distance="45m")) == (1.0, 45.0)


def test_resolve_transport_keeps_explicit_zero_distance():
    assert resolve_transport(TransportOptions(distance="0")) == (0.125, 0.0)


def test_resolve_transport_unparseable_distance():
    assert resolve_transport(TransportOptions(distance="far")) == (0.125, 30.0)


def test_resolve_transport_carrier_from_catalog():
    catalog = EstimationCatalog(carriers=[Carrier("d1", "Dumper", 1.0, 4000)])
    options = TransportOptions(carrier_id="d1", carrier_size=0.5, distance=20)
    assert resolve_transport(options, catalog) == (1.0, 20.0)


def test_resolve_transport_unknown_carrier_id_uses_size(caplog):
    with caplog.at_level(logging.WARNING):
        size, _ = resolve_transport(TransportOptions(carrier_id="x", carrier_size=0.5),
                                    EstimationCatalog())
    assert size == 0.5
    assert "Carrier x not found" in caplog.text
