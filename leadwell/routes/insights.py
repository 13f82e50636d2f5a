"""
AI insight routes.
"""
import logging

from flask import Blueprint, jsonify

from leadwell.errors import NotFoundError
from leadwell.pipeline.insights import generate_insights
from leadwell.routes.common import get_storage, json_body, parse
from leadwell.schemas import AiInsightCreate, AiInsightOut, AiInsightUpdate, render, render_many

logger = logging.getLogger('routes.insights')

bp = Blueprint('insights', __name__, url_prefix='/api/ai-insights')


@bp.route('', methods=['GET'])
def list_insights():
    return jsonify(render_many(AiInsightOut, get_storage().list_ai_insights()))


@bp.route('', methods=['POST'])
def create_insight():
    body = parse(AiInsightCreate, json_body('Invalid insight data'), 'Invalid insight data')
    insight = get_storage().create_ai_insight(body.model_dump())
    return jsonify(render(AiInsightOut, insight)), 201


@bp.route('/generate', methods=['POST'])
def generate():
    """Analyze the most recent leads and store fresh insights."""
    insights = generate_insights(get_storage())
    return jsonify(render_many(AiInsightOut, insights)), 201


@bp.route('/<int:insight_id>', methods=['PATCH'])
def mark_read(insight_id):
    body = parse(AiInsightUpdate, json_body('Invalid insight data'), 'Invalid insight data')
    insight = get_storage().mark_ai_insight_read(insight_id, read=body.read)
    if insight is None:
        raise NotFoundError('Insight', insight_id)
    return jsonify(render(AiInsightOut, insight))
