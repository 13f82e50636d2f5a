"""
Dashboard insight generation.

Three heuristic insights come from counting the most recent leads (top source,
qualification rate, top project type). Up to three more come from the model,
given a small sample of those leads. If the model is unavailable the
heuristic insights are still produced and stored.
"""
import logging
import math
from collections import Counter
from typing import Any, Dict, List

from leadwell.config import (
    INSIGHT_LEAD_WINDOW, INSIGHT_MODEL_COUNT, INSIGHT_MODEL_SAMPLE, INSIGHT_QUALIFIED_SCORE,
)
from leadwell.services.openai_client import suggest_insights
from leadwell.storage.base import Storage

logger = logging.getLogger('pipeline.insights')


def _percent(part, whole):
    # Half-up, not banker's rounding: 12.5 -> 13
    return int(math.floor(part * 100 / whole + 0.5))


def _top(counter: Counter):
    """Most common (name, count); ties go to the first seen."""
    if not counter:
        return None
    return counter.most_common(1)[0]


def heuristic_insights(leads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not leads:
        return []

    insights = []
    total = len(leads)

    top_source = _top(Counter(lead['source'] for lead in leads))
    if top_source:
        name, count = top_source
        insights.append({
            'title': f"{name} is Your Top Lead Source",
            'description': (
                f"{name} has generated {count} leads ({_percent(count, total)}% of total). "
                "Focus more resources on this channel."
            ),
            'type': 'source',
            'icon': 'ri-line-chart-line',
            'action': 'Optimize Channel',
            'action_url': f"/marketing/{name.lower()}",
        })

    qualified = sum(1 for lead in leads if (lead.get('score') or 0) >= INSIGHT_QUALIFIED_SCORE)
    rate = qualified / total * 100
    verdict = "Great job!" if rate > 50 else "This is below industry average. Review your lead sources."
    insights.append({
        'title': 'Lead Qualification Rate',
        'description': f"Your lead qualification rate is {_one_decimal(rate)}%. {verdict}",
        'type': 'quality',
        'icon': 'ri-shield-check-line',
        'action': 'Improve Quality',
        'action_url': '/leads/quality',
    })

    top_type = _top(Counter(lead['project_type'] for lead in leads))
    if top_type:
        name, count = top_type
        insights.append({
            'title': 'Popular Project Type',
            'description': (
                f"{name} is your most requested project type ({_percent(count, total)}%). "
                "Consider creating specialized workflows for these projects."
            ),
            'type': 'trend',
            'icon': 'ri-building-line',
            'action': 'Create Workflow',
            'action_url': '/workflows/new',
        })

    return insights


def _one_decimal(value):
    return f"{math.floor(value * 10 + 0.5) / 10:.1f}"


def model_insights(leads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Insights suggested by the model; empty on any failure."""
    try:
        batch = suggest_insights(leads[:INSIGHT_MODEL_SAMPLE])
    except Exception as e:
        logger.warning("Model insight generation failed, keeping heuristic insights: %s", e)
        return []

    return [
        {
            'title': insight.title,
            'description': insight.description,
            'type': insight.type,
            'icon': insight.icon,
            'action': 'View Details',
            'action_url': f"/insights/{insight.type}",
        }
        for insight in batch.insights[:INSIGHT_MODEL_COUNT]
    ]


def generate_insights(storage: Storage) -> List[Dict[str, Any]]:
    """Build and persist insights over the most recent leads. Never raises on model failure."""
    leads, _ = storage.list_leads(page=1, limit=INSIGHT_LEAD_WINDOW)
    if not leads:
        logger.info("No leads yet, skipping insight generation")
        return []

    drafts = heuristic_insights(leads) + model_insights(leads)
    saved = [storage.create_ai_insight({**draft, 'read': False}) for draft in drafts]
    logger.info("Generated %d insights from %d leads", len(saved), len(leads))
    return saved
