"""
External reasoning client — one OpenAI chat completion per operation.

Every call goes through the 'openai' circuit breaker and every JSON answer is
validated against a schema from reasoning_schemas before it is returned.
Callers see only ReasoningError subclasses, never SDK exceptions.
"""
import json
import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from leadwell.config import OPENAI_MODEL, PROJECT_TYPES, MODEL_INSIGHT_TYPES, MODEL_INSIGHT_ICONS
from leadwell.errors import ReasoningError, MalformedResponseError
from leadwell.extensions import openai_client as client
from leadwell.services.reasoning_schemas import LeadAssessment, FormAnalysis, InsightBatch

logger = logging.getLogger('services.openai')


def _chat_completion(**kwargs):
    """Route chat completion through the OpenAI circuit breaker."""
    from leadwell.services.circuit_breaker import get_breaker
    if client is None:
        raise ReasoningError("OpenAI client is not configured")
    cb = get_breaker('openai')
    try:
        return cb.call(client.chat.completions.create, **kwargs)
    except ReasoningError:
        raise
    except Exception as e:
        raise ReasoningError(f"OpenAI request failed: {e}") from e


def _ask_json(prompt: str, schema):
    """Send a prompt in JSON mode and validate the answer against schema."""
    response = _chat_completion(
        model=OPENAI_MODEL,
        messages=[{"role": "user", "content": prompt}],
        response_format={"type": "json_object"},
    )
    content = response.choices[0].message.content
    try:
        return schema.model_validate(json.loads(content or ''))
    except (json.JSONDecodeError, ValidationError, OverflowError) as e:
        logger.warning("Malformed %s response: %s", schema.__name__, e)
        raise MalformedResponseError(f"Model response did not match {schema.__name__}: {e}") from e


def _get(record, snake, camel):
    value = record.get(snake)
    return value if value is not None else record.get(camel)


def assess_lead(lead: Dict[str, Any]) -> LeadAssessment:
    """Ask the model for a 0-100 conversion score for a lead."""
    prompt = f"""You are an expert at evaluating construction leads. Please analyze this lead information:
- Name: {lead.get('name')}
- Email: {lead.get('email')}
- Phone: {lead.get('phone') or 'Not provided'}
- Company: {lead.get('company') or 'Not provided'}
- Project Type: {_get(lead, 'project_type', 'projectType')}
- Source: {lead.get('source')}

Score this lead from 0-100 based on:
1. How likely they are to convert to a paying customer
2. The potential value of their project
3. How well their project aligns with what construction companies typically handle
4. How complete their information is

Respond with a JSON object in this format:
{{ "score": number, "reason": "detailed explanation", "isScam": boolean }}"""
    return _ask_json(prompt, LeadAssessment)


def analyze_form_submission(content: str) -> FormAnalysis:
    """Extract contact details, qualification and call recommendation from free-form text."""
    prompt = f"""You are an AI assistant for a construction company. Analyze this form submission:

Form content: {content}

Extract the following information in JSON format:
1. Customer name
2. Email address
3. Phone number
4. Company name
5. Project type (classify as: {', '.join(PROJECT_TYPES[:-1])}, or {PROJECT_TYPES[-1]})
6. Budget estimate (number in dollars)
7. Timeline (when they want to start the project)
8. A qualification score from 0-100 (how qualified this lead is)
9. Explanation for qualification score
10. Schedule a call? (true/false - should we schedule a follow-up call?)
11. Suggested call date (provide specific date and time if a call is recommended)
12. Is this possibly a scam or spam? (true/false)
13. Reason for scam/spam classification

Respond in this JSON format:
{{
  "name": string,
  "email": string,
  "phone": string,
  "company": string,
  "projectType": string,
  "budget": number,
  "timeline": string,
  "qualificationScore": number,
  "qualificationReason": string,
  "scheduleCall": boolean,
  "callDate": string (ISO format),
  "isScam": boolean,
  "scamReason": string
}}"""
    return _ask_json(prompt, FormAnalysis)


def suggest_insights(lead_sample: List[Dict[str, Any]]) -> InsightBatch:
    """Ask for dashboard insights over a small sample of recent leads."""
    sample = [
        {
            'name': lead.get('name'),
            'email': lead.get('email'),
            'source': lead.get('source'),
            'projectType': lead.get('project_type'),
            'score': lead.get('score'),
            'status': lead.get('status'),
            'createdAt': lead.get('created_at'),
        }
        for lead in lead_sample
    ]
    prompt = f"""You are an expert AI assistant for a construction lead management platform. Analyze the following lead data:

{json.dumps(sample, indent=2, default=str)}

Analyze this data and provide 3 key insights about:
1. Lead trends (sources, project types, etc.)
2. Conversion opportunities
3. Process improvement suggestions

Format each insight as a JSON object with:
- title (short and attention-grabbing)
- description (2-3 sentences with specific data points)
- type (choose one: {', '.join(MODEL_INSIGHT_TYPES)})
- icon (choose one: {', '.join(MODEL_INSIGHT_ICONS)})

Respond with a JSON object of the form {{"insights": [ ...exactly 3 insight objects... ]}}."""
    return _ask_json(prompt, InsightBatch)


def summarize_call(call: Dict[str, Any], lead: Dict[str, Any]) -> str:
    """Three-to-four sentence professional summary of a call. Plain text."""
    prompt = f"""You are an AI assistant for a construction company. Create a summary of this call:

Call Details:
- Title: {call.get('title')}
- Notes: {call.get('notes') or 'No notes available'}
- Duration: {call.get('duration') or 'Unknown'} minutes
- Lead: {lead.get('name')} from {lead.get('company') or 'Unknown company'}
- Project Type: {lead.get('project_type')}

Create a professional, concise summary of this call that:
1. Highlights the key points discussed
2. Notes any action items or follow-ups
3. Provides a brief assessment of the lead's potential

Write this in a professional, constructive tone.
Limit the summary to 3-4 sentences."""
    response = _chat_completion(
        model=OPENAI_MODEL,
        messages=[{"role": "user", "content": prompt}],
    )
    summary = (response.choices[0].message.content or '').strip()
    if not summary:
        raise MalformedResponseError("Model returned an empty call summary")
    return summary
