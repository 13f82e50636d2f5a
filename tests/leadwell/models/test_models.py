"""Tests for leadwell.models and leadwell.database — ORM mapping and engine setup."""
import pytest
from unittest.mock import patch
from sqlalchemy.exc import IntegrityError

from leadwell.database import make_engine, utcnow
from leadwell.models import Call, FormSubmission, Lead


# ── to_dict ──────────────────────────────────────────────────────────────────

class TestToDict:

    def test_lead_columns_with_defaults(self, session_factory):
        with session_factory() as session:
            lead = Lead(name='Ana', email='ana@x.com', project_type='Other', source='Website')
            session.add(lead)
            session.commit()
            data = lead.to_dict()

        assert data['id'] == lead.id
        assert data['status'] == 'new'
        assert data['score'] == 0
        assert data['ai_processed'] is False
        assert data['assigned_to'] is None
        assert set(data) >= {'created_at', 'updated_at', 'project_type'}

    def test_json_columns_round_trip(self, session_factory):
        with session_factory() as session:
            submission = FormSubmission(raw_data={'content': 'hi', 'extra': [1, 2]})
            session.add(submission)
            session.commit()
            submission_id = submission.id

        with session_factory() as session:
            loaded = session.get(FormSubmission, submission_id)
            assert loaded.raw_data == {'content': 'hi', 'extra': [1, 2]}
            assert loaded.form_type == 'contact'


# ── SQLite foreign keys ──────────────────────────────────────────────────────

class TestForeignKeys:

    def test_call_requires_existing_lead(self, session_factory):
        with session_factory() as session:
            session.add(Call(lead_id=999, title='Orphan', scheduled_at=utcnow()))
            with pytest.raises(IntegrityError):
                session.commit()


# ── make_engine ──────────────────────────────────────────────────────────────

class TestMakeEngine:

    @patch('leadwell.database.create_engine')
    def test_postgres_scheme_rewritten(self, mock_create):
        make_engine('postgres://u:p@db:5432/leadwell')
        url = mock_create.call_args.args[0]
        assert url == 'postgresql://u:p@db:5432/leadwell'
        assert mock_create.call_args.kwargs['pool_pre_ping'] is True

    def test_sqlite_enables_foreign_keys(self):
        engine = make_engine('sqlite://')
        with engine.connect() as conn:
            assert conn.exec_driver_sql('PRAGMA foreign_keys').scalar() == 1
        engine.dispose()
