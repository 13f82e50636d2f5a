"""Tests for leadwell.pipeline.scoring — heuristic tables, clamping, blended score."""
import pytest
from unittest.mock import MagicMock, patch

from leadwell.errors import CircuitOpenError, MalformedResponseError, ReasoningError
from leadwell.pipeline import scoring
from leadwell.pipeline.scoring import (
    clamp_score, completeness_score, heuristic_score, project_type_score, score_lead, source_score,
)
from leadwell.services.reasoning_schemas import LeadAssessment


FULL_LEAD = {
    'name': 'Dana Reyes',
    'email': 'dana@reyesdev.com',
    'phone': '555-0101',
    'company': 'Reyes Development',
    'project_type': 'Industrial Facility',
    'source': 'Referrals',
}


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

class TestProjectTypeScore:
    """project_type_score() — fixed table, 0.5 for anything unknown."""

    @pytest.mark.parametrize('project_type,expected', [
        ('Commercial Office', 0.9),
        ('Industrial Facility', 0.85),
        ('Residential New Build', 0.8),
        ('Residential Renovation', 0.7),
    ])
    def test_known_types(self, project_type, expected):
        assert project_type_score(project_type) == expected

    @pytest.mark.parametrize('project_type', ['Other', 'Bridge', '', None])
    def test_unknown_type_defaults(self, project_type):
        assert project_type_score(project_type) == 0.5


class TestSourceScore:

    @pytest.mark.parametrize('source,expected', [
        ('Referrals', 0.95),
        ('LinkedIn', 0.85),
        ('Website', 0.8),
        ('Google', 0.75),
        ('Facebook', 0.7),
    ])
    def test_known_sources(self, source, expected):
        assert source_score(source) == expected

    def test_unknown_source_defaults(self):
        assert source_score('Trade Show') == 0.6

    def test_lookup_is_case_sensitive(self):
        assert source_score('website') == 0.6


class TestCompletenessScore:

    def test_all_fields_populated(self):
        assert completeness_score(FULL_LEAD) == pytest.approx(1.0)

    def test_each_field_adds_point_two(self):
        lead = {'name': 'A', 'email': 'a@b.c'}
        assert completeness_score(lead) == pytest.approx(0.4)

    def test_empty_strings_do_not_count(self):
        lead = {**FULL_LEAD, 'phone': '', 'company': None}
        assert completeness_score(lead) == pytest.approx(0.6)

    def test_accepts_camel_case_payload(self):
        lead = {'name': 'A', 'projectType': 'Other'}
        assert completeness_score(lead) == pytest.approx(0.4)

    def test_empty_lead(self):
        assert completeness_score({}) == 0


# ---------------------------------------------------------------------------
# Heuristic
# ---------------------------------------------------------------------------

class TestHeuristicScore:
    """heuristic_score() = 0.3*projectType + 0.3*source + 0.4*completeness."""

    def test_weighted_formula(self):
        # 0.3*0.85 + 0.3*0.95 + 0.4*1.0
        assert heuristic_score(FULL_LEAD) == pytest.approx(0.94)

    def test_sparse_lead(self):
        lead = {'name': 'X', 'email': 'x@y.z', 'project_type': 'Unknown', 'source': 'Unknown'}
        # 0.3*0.5 + 0.3*0.6 + 0.4*0.6
        assert heuristic_score(lead) == pytest.approx(0.57)

    def test_deterministic(self):
        assert heuristic_score(FULL_LEAD) == heuristic_score(dict(FULL_LEAD))

    @pytest.mark.parametrize('lead', [
        {},
        FULL_LEAD,
        {'project_type': 'Residential Renovation', 'source': 'Facebook'},
    ])
    def test_in_unit_range(self, lead):
        assert 0.0 <= heuristic_score(lead) <= 1.0


class TestClampScore:

    @pytest.mark.parametrize('value,expected', [
        (-20, 0),
        (0, 0),
        (70.4, 70),
        (70.5, 71),
        (99.6, 100),
        (250, 100),
    ])
    def test_rounds_half_up_and_clamps(self, value, expected):
        assert clamp_score(value) == expected


class TestScoringConfig:

    def test_yaml_config_loaded(self):
        cfg = scoring.load_scoring_config()
        assert cfg['weights'] == {'project_type': 0.3, 'source': 0.3, 'completeness': 0.4}
        assert cfg['source_scores']['Referrals'] == 0.95

    def test_missing_yaml_falls_back_to_defaults(self):
        with patch.object(scoring, '_scoring_config', None), \
                patch('leadwell.pipeline.scoring.open', side_effect=FileNotFoundError('missing'), create=True):
            cfg = scoring.load_scoring_config()
            assert cfg['version'] == 'default'
            assert cfg['unknown_source_score'] == 0.6


# ---------------------------------------------------------------------------
# Blended score
# ---------------------------------------------------------------------------

class TestScoreLead:
    """score_lead() blends heuristic (40%) with the model's score (60%)."""

    @patch('leadwell.services.openai_client.assess_lead')
    def test_blends_heuristic_and_model(self, mock_assess):
        mock_assess.return_value = LeadAssessment(score=80, reason='Strong referral')
        # 0.94*100*0.4 + 80*0.6 = 37.6 + 48 = 85.6
        assert score_lead(FULL_LEAD) == 86

    @patch('leadwell.services.openai_client.assess_lead')
    def test_result_clamped_to_100(self, mock_assess):
        mock_assess.return_value = LeadAssessment(score=400)
        assert score_lead(FULL_LEAD) == 100

    @patch('leadwell.services.openai_client.assess_lead')
    def test_negative_model_score_clamped_to_0(self, mock_assess):
        mock_assess.return_value = LeadAssessment(score=-500)
        assert score_lead(FULL_LEAD) == 0

    @pytest.mark.parametrize('error', [
        ReasoningError('timeout'),
        MalformedResponseError('not json'),
        CircuitOpenError('openai'),
        RuntimeError('unexpected'),
    ])
    @patch('leadwell.services.openai_client.assess_lead')
    def test_falls_back_to_heuristic_on_failure(self, mock_assess, error):
        mock_assess.side_effect = error
        assert score_lead(FULL_LEAD) == 94

    @patch('leadwell.services.openai_client.assess_lead')
    def test_passes_lead_to_model(self, mock_assess):
        mock_assess.return_value = LeadAssessment(score=50)
        score_lead(FULL_LEAD)
        mock_assess.assert_called_once_with(FULL_LEAD)


class TestScoreLeadWithRawCompletions:
    """score_lead() over the real client: bad numbers degrade, never raise."""

    @pytest.mark.parametrize('raw', ['{"score": NaN, "reason": "x"}', '{"score": Infinity}'])
    @patch('leadwell.services.openai_client.client')
    def test_non_finite_model_score_uses_heuristic(self, mock_client, raw):
        mock_client.chat.completions.create.return_value = _completion(raw)
        assert score_lead(FULL_LEAD) == 94

    @pytest.mark.parametrize('model_score,expected', [
        (150, 100),   # 37.6 + 90 = 127.6
        (-5, 35),     # 37.6 - 3 = 34.6
    ])
    @patch('leadwell.services.openai_client.client')
    def test_out_of_range_model_score_clamped(self, mock_client, model_score, expected):
        mock_client.chat.completions.create.return_value = _completion(f'{{"score": {model_score}}}')
        assert score_lead(FULL_LEAD) == expected


def _completion(text):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = text
    return response
