"""
Call routes — schedule, list (optionally upcoming only), update, AI summary.

Every call is returned with a compact summary of its lead.
"""
import logging

from flask import Blueprint, jsonify, request

from leadwell.errors import ForeignKeyViolation, NotFoundError, ReasoningError, RequestValidationError
from leadwell.routes.common import get_storage, json_body, parse
from leadwell.schemas import CallCreate, CallOut, CallUpdate, render
from leadwell.services.openai_client import summarize_call

logger = logging.getLogger('routes.calls')

bp = Blueprint('calls', __name__, url_prefix='/api/calls')

SUMMARY_FALLBACK = "Call summary generation failed. Please create a manual summary."


def _with_lead(storage, call, leads=None):
    """Attach {id, name, project_type} of the call's lead."""
    leads = leads if leads is not None else {}
    lead_id = call['lead_id']
    if lead_id not in leads:
        leads[lead_id] = storage.get_lead(lead_id)
    lead = leads[lead_id]
    if lead is not None:
        call = {**call, 'lead': {'id': lead['id'], 'name': lead['name'], 'project_type': lead['project_type']}}
    return render(CallOut, call)


def _get_call_or_404(storage, call_id):
    call = storage.get_call(call_id)
    if call is None:
        raise NotFoundError('Call', call_id)
    return call


@bp.route('', methods=['GET'])
def list_calls():
    """?upcoming=true -> scheduled from now on and not completed, soonest first."""
    upcoming = request.args.get('upcoming', 'false').lower() == 'true'
    storage = get_storage()
    leads = {}
    return jsonify([_with_lead(storage, call, leads) for call in storage.list_calls(upcoming_only=upcoming)])


@bp.route('/<int:call_id>', methods=['GET'])
def get_call(call_id):
    storage = get_storage()
    return jsonify(_with_lead(storage, _get_call_or_404(storage, call_id)))


@bp.route('', methods=['POST'])
def create_call():
    body = parse(CallCreate, json_body('Invalid call data'), 'Invalid call data')
    storage = get_storage()
    try:
        call = storage.create_call(body.model_dump())
    except ForeignKeyViolation as e:
        raise RequestValidationError(
            'Invalid call data',
            [{'field': 'leadId', 'message': f"Lead {body.lead_id} does not exist"}],
        ) from e
    logger.info("Call %s scheduled for lead %s at %s", call['id'], call['lead_id'], call['scheduled_at'])
    return jsonify(_with_lead(storage, call)), 201


@bp.route('/<int:call_id>', methods=['PATCH'])
def update_call(call_id):
    changes = parse(CallUpdate, json_body('Invalid call data'), 'Invalid call data')
    storage = get_storage()
    call = storage.update_call(call_id, changes.model_dump(exclude_unset=True))
    if call is None:
        raise NotFoundError('Call', call_id)
    return jsonify(_with_lead(storage, call))


@bp.route('/<int:call_id>/summary', methods=['POST'])
def generate_summary(call_id):
    """Ask the model for a short summary and store it as aiSummary."""
    storage = get_storage()
    call = _get_call_or_404(storage, call_id)
    lead = storage.get_lead(call['lead_id']) or {}
    try:
        summary = summarize_call(call, lead)
    except ReasoningError as e:
        logger.warning("Call %s: summary generation failed: %s", call_id, e)
        summary = SUMMARY_FALLBACK
    call = storage.update_call(call_id, {'ai_summary': summary})
    return jsonify(_with_lead(storage, call))
