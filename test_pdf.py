#!/usr/bin/env python3
"""
Test PDF report generation.
"""

import sys
sys.path.insert(0, 'src')

from estimator_api.pdf_generator import PDFReportGenerator
from estimator import (
    CostEstimator,
    EstimationCatalog,
    MaterialPrice,
    TaskTemplate,
    TransportOptions,
    WallCalculator,
    WallInput,
)


def test_generate_report():
    catalog = EstimationCatalog(
        templates=[TaskTemplate("t1", "Bricklaying", "pieces", 0.02)],
        prices=[MaterialPrice("Cement", "bag", 6.5)],
    )
    result = WallCalculator(catalog).calculate(
        WallInput(length=4, height=1, transport=TransportOptions()))
    estimate = CostEstimator(catalog.prices).estimate_project("Garden <wall> & steps", result)

    buffer = PDFReportGenerator().generate_report(estimate)
    data = buffer.getvalue()
    assert data.startswith(b"%PDF")
    assert len(data) > 1000


def test_generate_report_without_tasks():
    result = WallCalculator(EstimationCatalog()).calculate(WallInput(length=2, height=0.5))
    estimate = CostEstimator.unavailable().estimate_project("Empty", result)
    assert PDFReportGenerator().generate_report(estimate).getvalue().startswith(b"%PDF")
