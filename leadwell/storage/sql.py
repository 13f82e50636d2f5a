"""
SQLAlchemy-backed storage.

Each operation runs in its own session and commits on success, unless the
storage is bound to a session by atomic(), in which case operations only
flush and the enclosing atomic() block commits or rolls back once.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from leadwell.database import SessionLocal, utcnow
from leadwell.errors import DuplicateError, ForeignKeyViolation
from leadwell.models import AiInsight, Call, FormSubmission, Lead, MarketingChannel, ProjectType, Stat, User
from leadwell.storage.base import Storage

logger = logging.getLogger('storage.sql')

# model -> (column, parent model) for rows that must exist before a write
_REFERENCES = {
    Lead: [('assigned_to', User)],
    Call: [('lead_id', Lead)],
    FormSubmission: [('lead_id', Lead)],
}

_UNIQUE = {
    User: 'username',
    ProjectType: 'name',
    MarketingChannel: 'name',
}


def _record(obj):
    """Model -> plain dict; SQLite hands back naive datetimes, which are UTC."""
    if obj is None:
        return None
    record = obj.to_dict()
    for key, value in record.items():
        if isinstance(value, datetime) and value.tzinfo is None:
            record[key] = value.replace(tzinfo=timezone.utc)
    return record


def _translate_integrity_error(error):
    message = str(error.orig).lower()
    if 'foreign key' in message:
        return ForeignKeyViolation(str(error.orig))
    if 'unique' in message or 'duplicate' in message:
        return DuplicateError(str(error.orig))
    return error


class SqlStorage(Storage):

    def __init__(self, session_factory=None, session=None):
        self._session_factory = session_factory or SessionLocal
        self._session = session

    @contextmanager
    def _scope(self):
        if self._session is not None:
            try:
                yield self._session
                self._session.flush()
            except IntegrityError as e:
                raise _translate_integrity_error(e) from e
            return

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise _translate_integrity_error(e) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ── Generic helpers ──────────────────────────────────────────────────────

    def _check_references(self, session, model, values):
        for column, parent in _REFERENCES.get(model, []):
            value = values.get(column)
            if value is not None and session.get(parent, value) is None:
                raise ForeignKeyViolation(
                    f"{model.__tablename__}.{column}={value} references a missing {parent.__tablename__} row"
                )

    def _check_unique(self, session, model, values, own_id=None):
        column = _UNIQUE.get(model)
        if column is None or column not in values:
            return
        existing = session.scalars(
            select(model).where(getattr(model, column) == values[column])
        ).first()
        if existing is not None and existing.id != own_id:
            raise DuplicateError(f"{model.__tablename__}.{column} '{values[column]}' already exists")

    def _columns(self, model, data):
        names = {c.key for c in model.__table__.columns} - {'id', 'created_at', 'updated_at'}
        return {k: v for k, v in data.items() if k in names}

    def _insert(self, model, data):
        values = self._columns(model, data)
        with self._scope() as session:
            self._check_references(session, model, values)
            self._check_unique(session, model, values)
            obj = model(**values)
            session.add(obj)
            session.flush()
            return _record(obj)

    def _update(self, model, record_id, changes):
        values = self._columns(model, changes)
        with self._scope() as session:
            obj = session.get(model, record_id)
            if obj is None:
                return None
            self._check_references(session, model, values)
            self._check_unique(session, model, values, own_id=record_id)
            for key, value in values.items():
                setattr(obj, key, value)
            if 'updated_at' in model.__table__.columns:
                obj.updated_at = utcnow()
            session.flush()
            return _record(obj)

    def _get(self, model, record_id):
        with self._scope() as session:
            return _record(session.get(model, record_id))

    def _list(self, stmt):
        with self._scope() as session:
            return [_record(obj) for obj in session.scalars(stmt).all()]

    def _paged(self, model, page, limit):
        stmt = (
            select(model)
            .order_by(model.created_at.desc(), model.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        with self._scope() as session:
            total = session.scalar(select(func.count()).select_from(model))
            return [_record(obj) for obj in session.scalars(stmt).all()], total

    # ── Users ────────────────────────────────────────────────────────────────

    def get_user(self, user_id):
        return self._get(User, user_id)

    def get_user_by_username(self, username):
        rows = self._list(select(User).where(User.username == username))
        return rows[0] if rows else None

    def list_users(self):
        return self._list(select(User).order_by(User.id))

    def create_user(self, data):
        return self._insert(User, data)

    # ── Leads ────────────────────────────────────────────────────────────────

    def list_leads(self, page=1, limit=10):
        return self._paged(Lead, page, limit)

    def get_lead(self, lead_id):
        return self._get(Lead, lead_id)

    def create_lead(self, data):
        return self._insert(Lead, data)

    def update_lead(self, lead_id, changes):
        return self._update(Lead, lead_id, changes)

    # ── Calls ────────────────────────────────────────────────────────────────

    def list_calls(self, upcoming_only=False):
        stmt = select(Call)
        if upcoming_only:
            stmt = stmt.where(Call.scheduled_at >= utcnow(), Call.completed.is_not(True))
        return self._list(stmt.order_by(Call.scheduled_at.asc(), Call.id.asc()))

    def get_call(self, call_id):
        return self._get(Call, call_id)

    def create_call(self, data):
        return self._insert(Call, data)

    def update_call(self, call_id, changes):
        return self._update(Call, call_id, changes)

    # ── Catalog ──────────────────────────────────────────────────────────────

    def list_project_types(self):
        return self._list(select(ProjectType).order_by(ProjectType.id))

    def create_project_type(self, data):
        return self._insert(ProjectType, data)

    def list_marketing_channels(self):
        return self._list(select(MarketingChannel).order_by(MarketingChannel.id))

    def create_marketing_channel(self, data):
        return self._insert(MarketingChannel, data)

    # ── AI insights ──────────────────────────────────────────────────────────

    def list_ai_insights(self):
        return self._list(select(AiInsight).order_by(AiInsight.created_at.desc(), AiInsight.id.desc()))

    def create_ai_insight(self, data):
        return self._insert(AiInsight, data)

    def mark_ai_insight_read(self, insight_id, read=True):
        return self._update(AiInsight, insight_id, {'read': read})

    # ── Stats ────────────────────────────────────────────────────────────────

    def list_stats(self, period='week'):
        return self._list(select(Stat).where(Stat.period == period).order_by(Stat.id))

    def create_stat(self, data):
        return self._insert(Stat, data)

    def update_stat(self, stat_id, changes):
        return self._update(Stat, stat_id, changes)

    # ── Form submissions ─────────────────────────────────────────────────────

    def list_form_submissions(self, page=1, limit=10):
        return self._paged(FormSubmission, page, limit)

    def get_form_submission(self, submission_id):
        return self._get(FormSubmission, submission_id)

    def create_form_submission(self, data):
        return self._insert(FormSubmission, data)

    def update_form_submission(self, submission_id, changes):
        return self._update(FormSubmission, submission_id, changes)

    # ── Transactions ─────────────────────────────────────────────────────────

    @contextmanager
    def atomic(self):
        if self._session is not None:
            # Already inside a transaction; nest into it
            yield self
            return

        session = self._session_factory()
        try:
            yield SqlStorage(self._session_factory, session=session)
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise _translate_integrity_error(e) from e
        except Exception:
            session.rollback()
            logger.info("Transaction rolled back")
            raise
        finally:
            session.close()
