"""
Form submission routes — public intake endpoint plus admin listing and retry.
"""
import logging

from flask import Blueprint, jsonify, request

from leadwell.errors import NotFoundError
from leadwell.pipeline.intake import IntakeResult, reprocess_submission, submit_form
from leadwell.routes.common import get_storage, json_body, page_params, pagination, parse
from leadwell.schemas import CallOut, FormSubmissionCreate, FormSubmissionOut, LeadOut, render, render_many

logger = logging.getLogger('routes.form_submissions')

bp = Blueprint('form_submissions', __name__, url_prefix='/api/form-submissions')


def _intake_response(result: IntakeResult):
    body = {'submission': render(FormSubmissionOut, result.submission)}
    if result.ai_error:
        body.update(message='Form submitted, but AI processing failed', aiError=True)
    elif result.is_scam:
        body.update(message='Form identified as potential spam', isScam=True)
    else:
        body.update(
            message='Form processed successfully',
            lead=render(LeadOut, result.lead),
            call=render(CallOut, result.call),
            qualification=result.qualification,
        )
    return body


@bp.route('', methods=['POST'])
def submit():
    """Capture the form, then qualify it. 201 even when the model step fails."""
    payload = json_body('Form content is required')
    parse(FormSubmissionCreate, payload, 'Form content is required')
    result = submit_form(
        get_storage(),
        payload,
        ip_address=request.remote_addr,
        user_agent=request.headers.get('User-Agent'),
    )
    return jsonify(_intake_response(result)), 201


@bp.route('', methods=['GET'])
def list_submissions():
    params = page_params()
    submissions, total = get_storage().list_form_submissions(page=params.page, limit=params.limit)
    return jsonify({
        'submissions': render_many(FormSubmissionOut, submissions),
        'pagination': pagination(params, total),
    })


@bp.route('/<int:submission_id>', methods=['GET'])
def get_submission(submission_id):
    submission = get_storage().get_form_submission(submission_id)
    if submission is None:
        raise NotFoundError('Form submission', submission_id)
    return jsonify(render(FormSubmissionOut, submission))


@bp.route('/<int:submission_id>/process', methods=['POST'])
def process_submission(submission_id):
    """Retry intake for a submission whose model step failed."""
    result = reprocess_submission(get_storage(), submission_id)
    return jsonify(_intake_response(result))
