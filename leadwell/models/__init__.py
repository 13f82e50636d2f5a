"""
ORM models. Importing this package registers every table on Base.metadata.
"""
from leadwell.models.user import User
from leadwell.models.lead import Lead
from leadwell.models.call import Call
from leadwell.models.project_type import ProjectType
from leadwell.models.marketing_channel import MarketingChannel
from leadwell.models.form_submission import FormSubmission
from leadwell.models.ai_insight import AiInsight
from leadwell.models.stat import Stat

__all__ = [
    'User',
    'Lead',
    'Call',
    'ProjectType',
    'MarketingChannel',
    'FormSubmission',
    'AiInsight',
    'Stat',
]
