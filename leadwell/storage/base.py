"""
Storage contract.

Routes and the pipeline only ever see this interface. Records cross it as
plain dicts with snake_case keys (the column names); the HTTP layer renders
them to camelCase.

Conventions shared by every implementation:
  - create_* fills column defaults and stamps created_at/updated_at (UTC).
  - update_* applies only the given keys, refreshes updated_at, and returns
    the updated record, or None when the id is unknown.
  - Writes that reference a missing parent raise ForeignKeyViolation.
  - atomic() yields a storage whose writes commit together or not at all.
"""
from abc import ABC, abstractmethod
from typing import Any, ContextManager, Dict, List, Optional, Tuple

Record = Dict[str, Any]


class Storage(ABC):

    # ── Users ────────────────────────────────────────────────────────────────

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[Record]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[Record]: ...

    @abstractmethod
    def list_users(self) -> List[Record]: ...

    @abstractmethod
    def create_user(self, data: Record) -> Record: ...

    # ── Leads ────────────────────────────────────────────────────────────────

    @abstractmethod
    def list_leads(self, page: int = 1, limit: int = 10) -> Tuple[List[Record], int]:
        """Newest first. Returns (page of leads, total lead count)."""

    @abstractmethod
    def get_lead(self, lead_id: int) -> Optional[Record]: ...

    @abstractmethod
    def create_lead(self, data: Record) -> Record: ...

    @abstractmethod
    def update_lead(self, lead_id: int, changes: Record) -> Optional[Record]: ...

    # ── Calls ────────────────────────────────────────────────────────────────

    @abstractmethod
    def list_calls(self, upcoming_only: bool = False) -> List[Record]:
        """
        Ascending by scheduled_at. With upcoming_only, only calls scheduled
        at or after now that are not completed.
        """

    @abstractmethod
    def get_call(self, call_id: int) -> Optional[Record]: ...

    @abstractmethod
    def create_call(self, data: Record) -> Record:
        """Raises ForeignKeyViolation when data['lead_id'] is not a lead."""

    @abstractmethod
    def update_call(self, call_id: int, changes: Record) -> Optional[Record]: ...

    # ── Catalog ──────────────────────────────────────────────────────────────

    @abstractmethod
    def list_project_types(self) -> List[Record]: ...

    @abstractmethod
    def create_project_type(self, data: Record) -> Record: ...

    @abstractmethod
    def list_marketing_channels(self) -> List[Record]: ...

    @abstractmethod
    def create_marketing_channel(self, data: Record) -> Record: ...

    # ── AI insights ──────────────────────────────────────────────────────────

    @abstractmethod
    def list_ai_insights(self) -> List[Record]:
        """Newest first."""

    @abstractmethod
    def create_ai_insight(self, data: Record) -> Record: ...

    @abstractmethod
    def mark_ai_insight_read(self, insight_id: int, read: bool = True) -> Optional[Record]: ...

    # ── Stats ────────────────────────────────────────────────────────────────

    @abstractmethod
    def list_stats(self, period: str = 'week') -> List[Record]: ...

    @abstractmethod
    def create_stat(self, data: Record) -> Record: ...

    @abstractmethod
    def update_stat(self, stat_id: int, changes: Record) -> Optional[Record]: ...

    # ── Form submissions ─────────────────────────────────────────────────────

    @abstractmethod
    def list_form_submissions(self, page: int = 1, limit: int = 10) -> Tuple[List[Record], int]:
        """Newest first. Returns (page of submissions, total count)."""

    @abstractmethod
    def get_form_submission(self, submission_id: int) -> Optional[Record]: ...

    @abstractmethod
    def create_form_submission(self, data: Record) -> Record: ...

    @abstractmethod
    def update_form_submission(self, submission_id: int, changes: Record) -> Optional[Record]: ...

    # ── Transactions ─────────────────────────────────────────────────────────

    @abstractmethod
    def atomic(self) -> ContextManager['Storage']:
        """Context manager yielding a storage whose writes share one transaction."""
