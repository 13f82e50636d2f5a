"""Tests for leadwell.pipeline.insights — heuristic + model insights over recent leads."""
import pytest
from unittest.mock import patch

from leadwell.errors import CircuitOpenError, MalformedResponseError
from leadwell.pipeline.insights import generate_insights, heuristic_insights, model_insights
from leadwell.services.reasoning_schemas import InsightBatch


def _lead(source='Website', project_type='Commercial Office', score=50, **extra):
    return {'name': 'L', 'email': 'l@x.com', 'source': source, 'project_type': project_type, 'score': score, **extra}


def _batch(n):
    types = ['trend', 'quality', 'schedule', 'opportunity']
    return InsightBatch(insights=[
        {'title': f'Insight {i}', 'description': f'Detail {i}', 'type': types[i % 4], 'icon': 'ri-robot-line'}
        for i in range(n)
    ])


# ---------------------------------------------------------------------------
# Heuristic insights
# ---------------------------------------------------------------------------

class TestHeuristicInsights:

    def test_no_leads_no_insights(self):
        assert heuristic_insights([]) == []

    def test_top_source(self):
        leads = [_lead(source='Referrals')] * 3 + [_lead(source='Website')]
        source = heuristic_insights(leads)[0]
        assert source['type'] == 'source'
        assert source['title'] == 'Referrals is Your Top Lead Source'
        assert source['description'].startswith('Referrals has generated 3 leads (75% of total).')
        assert source['action'] == 'Optimize Channel'
        assert source['action_url'] == '/marketing/referrals'

    def test_source_tie_keeps_first_seen(self):
        leads = [_lead(source='Google'), _lead(source='LinkedIn'), _lead(source='LinkedIn'), _lead(source='Google')]
        assert heuristic_insights(leads)[0]['title'] == 'Google is Your Top Lead Source'

    def test_percentage_rounds_half_up(self):
        # 1 of 8 = 12.5% -> 13
        leads = [_lead(project_type='Industrial Facility')] + [_lead(project_type=f'T{i}') for i in range(7)]
        trend = heuristic_insights(leads)[2]
        assert trend['description'].startswith('Industrial Facility is your most requested project type (13%).')

    def test_qualification_rate_low(self):
        leads = [_lead(score=70), _lead(score=69), _lead(score=10)]
        quality = heuristic_insights(leads)[1]
        assert quality['type'] == 'quality'
        assert quality['description'] == (
            'Your lead qualification rate is 33.3%. This is below industry average. Review your lead sources.'
        )
        assert quality['action_url'] == '/leads/quality'

    def test_qualification_rate_high(self):
        leads = [_lead(score=90), _lead(score=70), _lead(score=None)]
        quality = heuristic_insights(leads)[1]
        assert quality['description'] == 'Your lead qualification rate is 66.7%. Great job!'

    def test_exactly_half_is_not_great(self):
        leads = [_lead(score=80), _lead(score=20)]
        assert 'below industry average' in heuristic_insights(leads)[1]['description']

    def test_three_insights_in_order(self):
        types = [i['type'] for i in heuristic_insights([_lead()])]
        assert types == ['source', 'quality', 'trend']


# ---------------------------------------------------------------------------
# Model insights
# ---------------------------------------------------------------------------

class TestModelInsights:

    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_truncated_to_three(self, mock_suggest):
        mock_suggest.return_value = _batch(5)
        insights = model_insights([_lead()])
        assert len(insights) == 3
        assert insights[0]['action'] == 'View Details'
        assert insights[0]['action_url'] == '/insights/trend'

    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_sample_limited_to_ten(self, mock_suggest):
        mock_suggest.return_value = _batch(0)
        leads = [_lead(name=f'L{i}') for i in range(25)]
        model_insights(leads)
        assert mock_suggest.call_args.args[0] == leads[:10]

    @pytest.mark.parametrize('error', [CircuitOpenError('openai'), MalformedResponseError('bad'), RuntimeError('x')])
    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_failure_returns_empty(self, mock_suggest, error):
        mock_suggest.side_effect = error
        assert model_insights([_lead()]) == []


# ---------------------------------------------------------------------------
# generate_insights
# ---------------------------------------------------------------------------

class TestGenerateInsights:

    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_empty_store_generates_nothing(self, mock_suggest, storage):
        assert generate_insights(storage) == []
        mock_suggest.assert_not_called()
        assert storage.list_ai_insights() == []

    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_persists_heuristic_and_model_insights(self, mock_suggest, storage, make_lead):
        make_lead(score=80)
        mock_suggest.return_value = _batch(3)

        saved = generate_insights(storage)

        assert len(saved) == 6
        assert all(i['read'] is False for i in saved)
        assert all(i['created_at'] is not None for i in saved)
        assert len(storage.list_ai_insights()) == 6

    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_model_failure_keeps_heuristics(self, mock_suggest, storage, make_lead):
        make_lead()
        mock_suggest.side_effect = CircuitOpenError('openai')

        saved = generate_insights(storage)

        assert [i['type'] for i in saved] == ['source', 'quality', 'trend']

    @patch('leadwell.pipeline.insights.suggest_insights')
    def test_window_is_most_recent_100(self, mock_suggest, storage, make_lead):
        mock_suggest.return_value = _batch(0)
        make_lead(source='Facebook')
        for _ in range(100):
            make_lead(source='Google')

        saved = generate_insights(storage)

        assert saved[0]['description'].startswith('Google has generated 100 leads (100% of total).')
