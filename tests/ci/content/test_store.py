"""
Tests for the static content store.

Tests cover:
- Loading content (flat and nested documents, missing and invalid files)
- Content queries
- ROI arithmetic
"""

import json
import logging

import pytest

from conductor.content.store import StaticContentStore

CONTENT = {
	'presentation': {
		'title': 'ACE Valet Operations Improvement Proposal',
		'subtitle': 'From Reactive Chaos to Proactive Excellence',
		'sections': [
			{'id': 'chaos', 'title': 'The Chaotic Desk', 'subtitle': 'Current Reality', 'presenterCue': 'Point at the papers'},
			{'id': 'valet', 'title': 'The Firefighter Solution', 'subtitle': 'Valet Layer'},
		],
	},
	'problems': [
		{
			'id': 'keys',
			'section': 'chaos',
			'title': 'Lost keys',
			'description': 'Keys misplaced during shift change',
			'impact': 'Guest complaints',
			'category': 'operations',
			'financial_impact': 12000,
		},
		{
			'id': 'damage',
			'section': 'chaos',
			'title': 'Vehicle damage',
			'description': 'Scratches during parking',
			'impact': 'Claims and refunds',
			'category': 'damage',
			'financial_impact': 25000,
		},
		{'id': 'wait', 'section': 'valet', 'title': 'Slow retrieval', 'financial_impact': 8000},
	],
	'solutions': [
		{'id': 'training', 'title': 'Key control training', 'category': 'training'},
		{'id': 'inspection', 'title': 'Inspection checklist', 'category': 'process'},
	],
	'executiveKPIs': [{'id': 'turnover', 'title': 'Turnover', 'value': '-35%', 'trend': 'down'}],
	'roiSimulator': {'baseInvestment': 40000, 'calculations': {'trainingCostPerEmployee': 400}},
	'aceWay': {'vision': {'title': 'VISION'}},
}


@pytest.fixture(scope='function')
def store():
	return StaticContentStore.from_dict(CONTENT)


class TestContentLoading:
	"""Tests for building a store from documents and files."""

	def test_nested_presentation_header(self, store):
		"""Test a content document with a nested presentation header."""
		assert store.data.title == 'ACE Valet Operations Improvement Proposal'
		assert [section.id for section in store.data.sections] == ['chaos', 'valet']
		assert store.get_section_info('chaos').presenter_cue == 'Point at the papers'

	def test_camel_case_aliases(self, store):
		"""Test that camelCase keys are accepted."""
		assert store.get_roi_simulator().base_investment == 40000
		assert store.get_roi_simulator().calculations.training_cost_per_employee == 400
		# Unset coefficients keep their defaults
		assert store.get_roi_simulator().calculations.average_employee_salary == 35000
		assert store.get_executive_kpis()[0].trend == 'down'

	def test_load_from_file(self, tmp_path):
		"""Test loading content from a JSON file."""
		path = tmp_path / 'presentation-data.json'
		path.write_text(json.dumps(CONTENT), encoding='utf-8')

		store = StaticContentStore.load_from_file(path)

		assert len(store.data.problems) == 3

	def test_missing_file_uses_fallback(self, tmp_path, caplog):
		"""Test that a missing file falls back to built-in content."""
		with caplog.at_level(logging.WARNING):
			store = StaticContentStore.load_from_file(tmp_path / 'missing.json')

		assert store.data.problems == []
		assert len(store.data.sections) == 5
		assert store.get_pilot_info()['location'] == 'Marriott Marquis San Diego Marina'

	def test_invalid_file_uses_fallback(self, tmp_path, caplog):
		"""Test that an invalid file is logged and falls back."""
		path = tmp_path / 'broken.json'
		path.write_text('{"problems": [{"title": "no id"}]}', encoding='utf-8')

		with caplog.at_level(logging.ERROR):
			store = StaticContentStore.load_from_file(path)

		assert store.data.problems == []
		assert any(record.levelno == logging.ERROR for record in caplog.records)

	def test_no_path_uses_fallback(self):
		"""Test that no path uses the built-in content."""
		store = StaticContentStore.load_from_file(None)
		assert store.get_section_info('executive').title == 'The Strategic Altitude'


class TestContentQueries:
	"""Tests for content queries."""

	def test_problems_by_section(self, store):
		"""Test filtering problems by section."""
		assert [problem.id for problem in store.get_problems_by_section('chaos')] == ['keys', 'damage']
		assert store.get_problems_by_section('closing') == []

	def test_solutions_by_category(self, store):
		"""Test filtering solutions by category."""
		assert [solution.id for solution in store.get_solutions_by_category('process')] == ['inspection']

	def test_get_problem(self, store):
		"""Test looking up a problem by id."""
		assert store.get_problem('damage').title == 'Vehicle damage'
		assert store.get_problem('unknown') is None

	def test_total_financial_impact(self, store):
		"""Test summing the financial impact of all problems."""
		assert store.get_total_financial_impact() == 45000

	def test_problems_by_category(self, store):
		"""Test grouping problems by category."""
		groups = store.get_problems_by_category()
		assert sorted(groups) == ['damage', 'operations', 'other']
		assert [problem.id for problem in groups['other']] == ['wait']

	def test_search_problems(self, store):
		"""Test case-insensitive problem search."""
		assert [problem.id for problem in store.search_problems('CLAIMS')] == ['damage']
		assert [problem.id for problem in store.search_problems('keys')] == ['keys']


class TestROICalculation:
	"""Tests for the ROI arithmetic."""

	def test_default_coefficients(self):
		"""Test the ROI calculation with default coefficients."""
		result = StaticContentStore().calculate_roi(50_000)

		assert result.employees_trained == 250
		assert result.damage_savings == 15_000
		assert result.retention_savings == 4_593_750
		assert result.revenue_increase == 139_886
		assert result.total_savings == 4_748_636
		assert result.net_profit == 4_698_636
		assert result.roi_percentage == 9397

	def test_custom_coefficients(self, store):
		"""Test the ROI calculation with custom coefficients."""
		result = store.calculate_roi(50_000)
		assert result.employees_trained == 125

	def test_partial_employee_is_not_trained(self):
		"""Test that a partial training cost trains nobody extra."""
		assert StaticContentStore().calculate_roi(399).employees_trained == 1

	@pytest.mark.parametrize('investment', [0, -100])
	def test_non_positive_investment_rejected(self, investment):
		"""Test that a non-positive investment is rejected."""
		with pytest.raises(ValueError):
			StaticContentStore().calculate_roi(investment)
