"""
Pydantic schemas for the JSON API.

Wire format is camelCase (projectType, leadId, ...); storage records are
snake_case dicts. Every schema accepts either spelling on input and
dumps camelCase via render().
"""
from datetime import date as date_type, datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from leadwell.config import BUDGET_MAX
from leadwell.pipeline.scoring import clamp_score


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value):
    """Normalize to aware UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


def field_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """Flatten a pydantic ValidationError into [{field, message}, ...]."""
    errors = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err['loc']) or '__root__'
        errors.append({'field': field, 'message': err['msg']})
    return errors


def render(schema_cls, record):
    """Dump a storage record through a response schema as camelCase JSON-ready data."""
    if record is None:
        return None
    return schema_cls.model_validate(record).model_dump(by_alias=True, mode='json')


def render_many(schema_cls, records):
    return [render(schema_cls, r) for r in records]


# ── Query parameters ─────────────────────────────────────────────────────────

class PageParams(ApiModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class StatsParams(ApiModel):
    period: str = Field('week', min_length=1)


# ── Leads ────────────────────────────────────────────────────────────────────

_EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+$'
_LEAD_REQUIRED = ('name', 'email', 'project_type', 'source')


class LeadCreate(ApiModel):
    """Manual lead entry. Score is always computed server-side."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    name: str = Field(min_length=1)
    email: str = Field(pattern=_EMAIL_PATTERN)
    phone: Optional[str] = None
    company: Optional[str] = None
    project_type: str = Field(min_length=1)
    budget: Optional[int] = Field(None, ge=0, le=BUDGET_MAX)
    timeline: Optional[str] = None
    source: str = Field(min_length=1)
    source_icon: Optional[str] = None
    status: str = 'new'
    notes: Optional[str] = None
    assigned_to: Optional[int] = None


class LeadUpdate(ApiModel):
    """Partial update — only fields present in the body are written."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=_EMAIL_PATTERN)
    phone: Optional[str] = None
    company: Optional[str] = None
    project_type: Optional[str] = Field(None, min_length=1)
    budget: Optional[int] = Field(None, ge=0, le=BUDGET_MAX)
    timeline: Optional[str] = None
    source: Optional[str] = Field(None, min_length=1)
    source_icon: Optional[str] = None
    score: Optional[int] = None
    status: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    assigned_to: Optional[int] = None

    @field_validator('score', mode='before')
    @classmethod
    def _clamp_score(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return clamp_score(value)
        return value

    @model_validator(mode='after')
    def _required_columns_not_null(self):
        for name in _LEAD_REQUIRED:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class LeadOut(ApiModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    project_type: str
    budget: Optional[int] = None
    timeline: Optional[str] = None
    source: str
    source_icon: Optional[str] = None
    score: Optional[int] = 0
    status: str
    notes: Optional[str] = None
    ai_qualified: Optional[bool] = None
    ai_qualification_reason: Optional[str] = None
    ai_processed: Optional[bool] = False
    ai_analysis: Optional[str] = None
    assigned_to: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class LeadSummary(ApiModel):
    id: int
    name: str
    project_type: str


# ── Calls ────────────────────────────────────────────────────────────────────

class Attendee(ApiModel):
    id: Union[int, str]
    name: str
    role: Optional[str] = None


class CallCreate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    lead_id: int
    scheduled_at: UtcDatetime
    duration: int = Field(30, gt=0)
    title: str = Field(min_length=1)
    notes: Optional[str] = None
    completed: bool = False
    attendees: List[Attendee] = Field(default_factory=list)
    ai_scheduled: bool = False
    follow_up_needed: bool = False
    follow_up_date: Optional[UtcDatetime] = None


class CallUpdate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')

    scheduled_at: Optional[UtcDatetime] = None
    duration: Optional[int] = Field(None, gt=0)
    title: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    completed: Optional[bool] = None
    attendees: Optional[List[Attendee]] = None
    follow_up_needed: Optional[bool] = None
    follow_up_date: Optional[UtcDatetime] = None

    @model_validator(mode='after')
    def _required_columns_not_null(self):
        for name in ('scheduled_at', 'title'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class CallOut(ApiModel):
    id: int
    lead_id: int
    scheduled_at: UtcDatetime
    duration: Optional[int] = 30
    title: str
    notes: Optional[str] = None
    completed: Optional[bool] = False
    attendees: List[Dict[str, Any]] = Field(default_factory=list)
    ai_scheduled: Optional[bool] = False
    ai_summary: Optional[str] = None
    follow_up_needed: Optional[bool] = False
    follow_up_date: Optional[UtcDatetime] = None
    created_at: datetime
    updated_at: datetime
    lead: Optional[LeadSummary] = None

    @field_validator('attendees', mode='before')
    @classmethod
    def _attendees_default(cls, value):
        return value or []


# ── Form submissions ─────────────────────────────────────────────────────────

class FormSubmissionCreate(ApiModel):
    """Inbound form. Any extra keys are kept verbatim in raw_data."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='allow')

    content: str
    form_type: str = 'contact'
    source: str = 'website'

    @field_validator('content')
    @classmethod
    def _content_not_blank(cls, value):
        if not value.strip():
            raise ValueError('Form content is required')
        return value


class FormSubmissionOut(ApiModel):
    id: int
    form_type: str
    raw_data: Any
    source: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    status: str
    ai_processed: Optional[bool] = False
    ai_response: Optional[Any] = None
    lead_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# ── AI insights ──────────────────────────────────────────────────────────────

InsightType = Literal['quality', 'schedule', 'trend', 'source', 'opportunity']


class AiInsightCreate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: InsightType
    icon: str = Field(min_length=1)
    action: Optional[str] = None
    action_url: Optional[str] = None
    priority: str = 'medium'
    read: bool = False


class AiInsightUpdate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')

    read: bool


class AiInsightOut(ApiModel):
    id: int
    title: str
    description: str
    type: str
    icon: str
    action: Optional[str] = None
    action_url: Optional[str] = None
    priority: Optional[str] = 'medium'
    read: Optional[bool] = False
    created_at: datetime


# ── Stats ────────────────────────────────────────────────────────────────────

class StatCreate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    name: str = Field(min_length=1)
    value: str
    change_percentage: Optional[int] = None
    icon: str
    icon_bg: str
    icon_color: str
    period: str = 'week'
    date: Optional[date_type] = None

    @field_validator('value', mode='before')
    @classmethod
    def _value_as_text(cls, value):
        # Dashboard values arrive as "24" or 24; stored as text either way
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class StatUpdate(StatCreate):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')

    name: Optional[str] = Field(None, min_length=1)
    value: Optional[str] = None
    icon: Optional[str] = None
    icon_bg: Optional[str] = None
    icon_color: Optional[str] = None
    period: Optional[str] = Field(None, min_length=1)


class StatOut(ApiModel):
    id: int
    name: str
    value: str
    change_percentage: Optional[int] = None
    icon: str
    icon_bg: str
    icon_color: str
    period: str
    date: Optional[date_type] = None
    created_at: datetime
    updated_at: datetime


# ── Catalog ──────────────────────────────────────────────────────────────────

class ProjectTypeCreate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    name: str = Field(min_length=1)
    description: Optional[str] = None
    min_budget: Optional[int] = Field(None, ge=0, le=BUDGET_MAX)
    average_timeline: Optional[str] = None


class ProjectTypeOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    min_budget: Optional[int] = None
    average_timeline: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MarketingChannelCreate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    name: str = Field(min_length=1)
    icon: str = Field(min_length=1)
    active: bool = True
    conversion_rate: Optional[int] = Field(None, ge=0, le=100)


class MarketingChannelOut(ApiModel):
    id: int
    name: str
    icon: str
    active: Optional[bool] = True
    conversion_rate: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class UserCreate(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    username: str = Field(min_length=1)
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None


class UserOut(ApiModel):
    """Never includes the password hash."""
    id: int
    username: str
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: datetime
