"""
Form intake — turn an inbound contact form into a qualified Lead (and Call).

    submit_form()            persist the raw submission, then process it
    reprocess_submission()   retry processing for a submission that errored

Processing asks the model to analyze the free-text content, then either:
  - records the failure on the submission (status=error, no lead),
  - flags the submission as spam (status=spam, no lead), or
  - creates the Lead, the optional Call and links the submission, all in one
    storage transaction.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from leadwell.config import (
    DEFAULT_CALL_DURATION, PROJECT_TYPES, QUALIFICATION_THRESHOLD, WEBSITE_SOURCE_ICON,
)
from leadwell.database import utcnow
from leadwell.errors import ConflictError, NotFoundError, ReasoningError
from leadwell.pipeline.scoring import clamp_score
from leadwell.services.openai_client import analyze_form_submission
from leadwell.storage.base import Storage

logger = logging.getLogger('pipeline.intake')


@dataclass
class IntakeResult:
    """Outcome of one processing attempt."""
    submission: Dict[str, Any]
    lead: Optional[Dict[str, Any]] = None
    call: Optional[Dict[str, Any]] = None
    qualification: Optional[str] = None
    is_scam: bool = False
    ai_error: bool = False


def submit_form(storage: Storage, payload: Dict[str, Any],
                ip_address: Optional[str] = None, user_agent: Optional[str] = None) -> IntakeResult:
    """Persist a form payload verbatim and run it through the intake pipeline."""
    submission = storage.create_form_submission({
        'form_type': payload.get('formType') or payload.get('form_type') or 'contact',
        'source': payload.get('source') or 'website',
        'status': 'new',
        'raw_data': payload,
        'ip_address': ip_address,
        'user_agent': user_agent,
        'ai_processed': False,
    })
    logger.info("Form submission %s received (source=%s)", submission['id'], submission['source'])
    return _process(storage, submission)


def reprocess_submission(storage: Storage, submission_id: int) -> IntakeResult:
    """Run intake again for a submission that has no lead and is not spam."""
    submission = storage.get_form_submission(submission_id)
    if submission is None:
        raise NotFoundError('Form submission', submission_id)
    if submission['status'] == 'spam':
        raise ConflictError("Submission was classified as spam")
    if submission['lead_id'] is not None:
        raise ConflictError("Submission already produced a lead")
    return _process(storage, submission)


# ── Processing ───────────────────────────────────────────────────────────────

def _process(storage, submission):
    raw = submission['raw_data'] if isinstance(submission['raw_data'], dict) else {}
    content = raw.get('content') or ''

    try:
        analysis = analyze_form_submission(content)
    except ReasoningError as e:
        logger.warning("Form submission %s: AI processing failed: %s", submission['id'], e)
        submission = storage.update_form_submission(submission['id'], {
            'status': 'error',
            'ai_response': {'error': str(e)},
        })
        return IntakeResult(submission=submission, ai_error=True)

    ai_response = analysis.model_dump(by_alias=True, mode='json')

    if analysis.is_scam:
        logger.info("Form submission %s flagged as spam: %s", submission['id'], analysis.scam_reason)
        submission = storage.update_form_submission(submission['id'], {
            'status': 'spam',
            'ai_processed': True,
            'ai_response': ai_response,
        })
        return IntakeResult(submission=submission, is_scam=True)

    score = clamp_score(analysis.qualification_score)
    qualified = score > QUALIFICATION_THRESHOLD
    project_type = normalize_project_type(analysis.project_type)

    lead_data = {
        'name': analysis.name or _text(raw.get('name')) or 'Unknown',
        'email': analysis.email or _text(raw.get('email')) or '',
        'phone': analysis.phone or _text(raw.get('phone')),
        'company': analysis.company or _text(raw.get('company')),
        'project_type': project_type,
        'budget': analysis.budget,
        'timeline': analysis.timeline,
        'source': submission['source'] or 'website',
        'source_icon': WEBSITE_SOURCE_ICON,
        'score': score,
        'status': 'qualified' if qualified else 'new',
        'ai_qualified': qualified,
        'ai_qualification_reason': analysis.qualification_reason,
        'ai_processed': True,
    }

    with storage.atomic() as tx:
        lead = tx.create_lead(lead_data)
        call = None
        if analysis.schedule_call:
            call = tx.create_call({
                'lead_id': lead['id'],
                'title': f"Initial Consultation - {project_type}",
                'scheduled_at': parse_call_date(analysis.call_date),
                'duration': DEFAULT_CALL_DURATION,
                'notes': _call_notes(project_type, analysis.budget, analysis.timeline),
                'ai_scheduled': True,
            })
        submission = tx.update_form_submission(submission['id'], {
            'lead_id': lead['id'],
            'ai_processed': True,
            'status': 'processed',
            'ai_response': ai_response,
        })

    logger.info(
        "Form submission %s -> lead %s (score=%d, qualified=%s, call=%s)",
        submission['id'], lead['id'], score, qualified, call['id'] if call else None,
    )
    return IntakeResult(
        submission=submission,
        lead=lead,
        call=call,
        qualification=analysis.qualification_reason,
    )


def _text(value):
    """Payload fallbacks are unvalidated; only non-blank strings are used."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def normalize_project_type(value) -> str:
    """Map the model's label onto the fixed taxonomy; anything else is 'Other'."""
    if value:
        wanted = value.strip().lower()
        for name in PROJECT_TYPES:
            if name.lower() == wanted:
                return name
    return 'Other'


def parse_call_date(value) -> datetime:
    """ISO date from the model, as aware UTC. Missing or unparsable -> now + 1 day."""
    if value:
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            logger.info("Unparsable call date %r, scheduling for tomorrow", value)
        else:
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
    return utcnow() + timedelta(days=1)


def _call_notes(project_type, budget, timeline):
    budget_text = f"${budget}" if budget is not None else 'not specified'
    return (
        "Auto-scheduled from form submission. "
        f"Project details: {project_type}, Budget: {budget_text}, Timeline: {timeline or 'not specified'}"
    )
