"""
Lead scoring — deterministic heuristic blended with the model's assessment.

heuristic_score() is pure: three table/field lookups weighted into [0, 1].
score_lead() asks the reasoning client for a 0-100 score and blends the two;
if the model is unavailable it falls back to the heuristic alone.
"""
import math
import os
import logging
from typing import Any, Dict

import yaml

logger = logging.getLogger('pipeline.scoring')


# ── Scoring config (YAML with hardcoded fallback) ────────────────────────────

_scoring_config = None


def _default_config():
    """Hardcoded fallback if YAML is missing."""
    return {
        'version': 'default',
        'project_type_scores': {
            'Commercial Office': 0.9,
            'Industrial Facility': 0.85,
            'Residential New Build': 0.8,
            'Residential Renovation': 0.7,
        },
        'unknown_project_type_score': 0.5,
        'source_scores': {
            'Referrals': 0.95,
            'LinkedIn': 0.85,
            'Website': 0.8,
            'Google': 0.75,
            'Facebook': 0.7,
        },
        'unknown_source_score': 0.6,
        'completeness_fields': ['name', 'email', 'phone', 'company', 'project_type'],
        'completeness_per_field': 0.2,
        'weights': {
            'project_type': 0.3,
            'source': 0.3,
            'completeness': 0.4,
        },
        'blend': {
            'heuristic_share': 0.4,
            'model_share': 0.6,
        },
    }


def load_scoring_config():
    """Load scoring config from YAML, with in-memory cache and hardcoded fallback."""
    global _scoring_config
    if _scoring_config is not None:
        return _scoring_config

    config_path = os.path.join(os.path.dirname(__file__), 'scoring_config.yaml')
    try:
        with open(config_path, 'r') as f:
            _scoring_config = yaml.safe_load(f)
        logger.info("Config loaded from YAML (version=%s)", _scoring_config.get('version', '?'))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("YAML config not found (%s), using defaults", e)
        _scoring_config = _default_config()

    return _scoring_config


# ── Heuristic ────────────────────────────────────────────────────────────────

def _field(lead, name):
    # Accept snake_case records and camelCase payloads alike
    if name in lead:
        return lead[name]
    camel = name.split('_')[0] + ''.join(p.title() for p in name.split('_')[1:])
    return lead.get(camel)


def project_type_score(project_type) -> float:
    cfg = load_scoring_config()
    return cfg['project_type_scores'].get(project_type, cfg['unknown_project_type_score'])


def source_score(source) -> float:
    cfg = load_scoring_config()
    return cfg['source_scores'].get(source, cfg['unknown_source_score'])


def completeness_score(lead: Dict[str, Any]) -> float:
    cfg = load_scoring_config()
    populated = sum(1 for name in cfg['completeness_fields'] if _field(lead, name))
    return min(1.0, populated * cfg['completeness_per_field'])


def heuristic_score(lead: Dict[str, Any]) -> float:
    """Weighted heuristic in [0, 1]. Never touches the network."""
    weights = load_scoring_config()['weights']
    return (
        weights['project_type'] * project_type_score(_field(lead, 'project_type'))
        + weights['source'] * source_score(_field(lead, 'source'))
        + weights['completeness'] * completeness_score(lead)
    )


def clamp_score(value) -> int:
    """Round half up and clamp any numeric score into the stored 0-100 range."""
    return max(0, min(100, int(math.floor(value + 0.5))))


# ── Blended score ────────────────────────────────────────────────────────────

def score_lead(lead: Dict[str, Any]) -> int:
    """
    Final 0-100 score for a lead.

    Blends the heuristic with the model's score; any failure on the model
    side degrades to the heuristic alone, so this never raises.
    """
    from leadwell.services.openai_client import assess_lead

    h = heuristic_score(lead)
    blend = load_scoring_config()['blend']
    try:
        assessment = assess_lead(lead)
        final = h * 100 * blend['heuristic_share'] + assessment.score * blend['model_share']
        score = clamp_score(final)
    except Exception as e:
        logger.warning("Model scoring failed, using heuristic score: %s", e)
        return clamp_score(h * 100)

    logger.info("Lead '%s' scored %.1f (heuristic=%.2f, model=%s)",
                _field(lead, 'name'), final, h, assessment.score)
    return score
