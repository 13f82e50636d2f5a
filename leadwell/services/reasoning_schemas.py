"""
Expected shapes of the model's JSON answers.

Every response is validated against one of these before use; a mismatch is
reported as MalformedResponseError by the client.
"""
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from leadwell.config import BUDGET_MAX


class _ModelAnswer(BaseModel):
    # json.loads() accepts NaN and Infinity; neither is a usable score
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra='ignore', allow_inf_nan=False,
    )


class LeadAssessment(_ModelAnswer):
    """Answer to the lead-scoring prompt."""
    score: float
    reason: str = ''
    is_scam: bool = False


class FormAnalysis(_ModelAnswer):
    """Answer to the form-intake prompt."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    project_type: Optional[str] = None
    budget: Optional[int] = None
    timeline: Optional[str] = None
    qualification_score: float
    qualification_reason: str = ''
    schedule_call: bool = False
    call_date: Optional[str] = None
    is_scam: bool = False
    scam_reason: Optional[str] = None

    @field_validator('phone', 'timeline', mode='before')
    @classmethod
    def _number_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator('budget', mode='before')
    @classmethod
    def _parse_budget(cls, value):
        # "$250,000" / "250000" / 250000.0 all mean the same budget
        if value is None or isinstance(value, bool):
            return None
        if not isinstance(value, (int, float)):
            try:
                value = float(re.sub(r'[^\d.]', '', str(value)))
            except ValueError:
                return None
        # NaN, Infinity and out-of-range amounts fail this comparison and are dropped
        if not 0 <= value <= BUDGET_MAX:
            return None
        return int(value)


class ModelInsight(_ModelAnswer):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: Literal['trend', 'quality', 'schedule', 'opportunity']
    icon: Literal['ri-robot-line', 'ri-calendar-check-line', 'ri-building-line', 'ri-line-chart-line']


class InsightBatch(_ModelAnswer):
    """Answer to the insight prompt: {"insights": [...]}."""
    insights: List[ModelInsight]
