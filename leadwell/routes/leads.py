"""
Lead routes — paginated list, detail, manual entry, partial update.
"""
import logging

from flask import Blueprint, jsonify

from leadwell.errors import NotFoundError
from leadwell.pipeline.scoring import score_lead
from leadwell.routes.common import get_storage, json_body, page_params, pagination, parse
from leadwell.schemas import LeadCreate, LeadOut, LeadUpdate, render, render_many

logger = logging.getLogger('routes.leads')

bp = Blueprint('leads', __name__, url_prefix='/api/leads')


@bp.route('', methods=['GET'])
def list_leads():
    """Newest first, `page` / `limit` query params."""
    params = page_params()
    leads, total = get_storage().list_leads(page=params.page, limit=params.limit)
    return jsonify({
        'leads': render_many(LeadOut, leads),
        'pagination': pagination(params, total),
    })


@bp.route('/<int:lead_id>', methods=['GET'])
def get_lead(lead_id):
    lead = get_storage().get_lead(lead_id)
    if lead is None:
        raise NotFoundError('Lead', lead_id)
    return jsonify(render(LeadOut, lead))


@bp.route('', methods=['POST'])
def create_lead():
    """Manual lead entry; the score is always computed here, never taken from the client."""
    body = parse(LeadCreate, json_body('Invalid lead data'), 'Invalid lead data')
    data = body.model_dump()
    data['score'] = score_lead(data)
    lead = get_storage().create_lead(data)
    logger.info("Lead %s created (source=%s, score=%s)", lead['id'], lead['source'], lead['score'])
    return jsonify(render(LeadOut, lead)), 201


@bp.route('/<int:lead_id>', methods=['PATCH'])
def update_lead(lead_id):
    changes = parse(LeadUpdate, json_body('Invalid lead data'), 'Invalid lead data')
    lead = get_storage().update_lead(lead_id, changes.model_dump(exclude_unset=True))
    if lead is None:
        raise NotFoundError('Lead', lead_id)
    return jsonify(render(LeadOut, lead))
