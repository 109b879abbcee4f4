#!/usr/bin/env python3
"""
Test task template matching.
"""

import sys
sys.path.insert(0, 'src')

from estimator import TaskMatcher, TaskTemplate, score_dimensions
from estimator.task_matcher import rate_of, template_of


TEMPLATES = [
    TaskTemplate("1", "Tile Installation 90 × 30", "pieces", 0.3),
    TaskTemplate("2", "Tile Installation 90 × 45", "pieces", 0.4),
    TaskTemplate("3", "Tile installation (large format)", "pieces", 0.9),
    TaskTemplate("4", "Mixing  Mortar", "batch", 0.1),
    TaskTemplate("5", "cutting porcelain", "pieces", None),
]


def test_score_dimensions():
    assert score_dimensions("Tile Installation 90 × 60", 90, 60) == 100
    assert score_dimensions("Tile Installation 90 x 30", 90, 60) == 50
    assert score_dimensions("Tile Installation 60 × 60", 90, 60) == 30
    assert score_dimensions("Tile Installation 30 × 30", 90, 60) == 0
    assert score_dimensions("Tile Installation", 90, 60) is None


def test_best_dimension_match_keeps_first_of_equal_scores():
    template, score = TaskMatcher(TEMPLATES).best_dimension_match(90, 60)
    assert template.id == "1"
    assert score == 50


def test_best_dimension_match_skips_names_without_sizes():
    matcher = TaskMatcher([TEMPLATES[2]])
    assert matcher.best_dimension_match(90, 60) is None


def test_find_exact_ignores_case_and_spacing():
    template = TaskMatcher(TEMPLATES).find_exact("mixing mortar")
    assert template is not None
    assert template.id == "4"


def test_find_containing_needs_every_fragment():
    matcher = TaskMatcher(TEMPLATES)
    assert matcher.find_containing("tile", "45").id == "2"
    assert matcher.find_containing("tile", "75") is None


def test_find_by_id():
    matcher = TaskMatcher(TEMPLATES)
    assert matcher.find_by_id(4).name == "Mixing  Mortar"
    assert matcher.find_by_id(None) is None


def test_rate_found():
    lookup = TaskMatcher(TEMPLATES).rate("mixing mortar", 0.5)
    assert not lookup.is_fallback
    assert rate_of(lookup) == 0.1
    assert template_of(lookup).id == "4"


def test_rate_without_hours_falls_back():
    lookup = TaskMatcher(TEMPLATES).rate("cutting porcelain", 0.5)
    assert lookup.is_fallback
    assert rate_of(lookup) == 0.5
    assert template_of(lookup) is None
    assert "cutting porcelain" in lookup.reason
