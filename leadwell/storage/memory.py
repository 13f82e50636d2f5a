"""
In-process storage arena.

Tables are dicts of id -> record with integer id counters, guarded by one
re-entrant lock. Records are deep-copied on the way in and out so callers
never share mutable state with the arena. atomic() snapshots every table and
restores the snapshot if the block raises.
"""
import copy
import logging
import threading
from contextlib import contextmanager

from leadwell.database import utcnow
from leadwell.errors import DuplicateError, ForeignKeyViolation
from leadwell.storage.base import Storage

logger = logging.getLogger('storage.memory')


# Column defaults mirror leadwell/models/*
_DEFAULTS = {
    'users': {
        'username': None, 'password_hash': None, 'name': None, 'role': None,
        'email': None, 'phone': None, 'job_title': None, 'department': None,
        'bio': None, 'avatar': None,
    },
    'leads': {
        'name': None, 'email': None, 'phone': None, 'company': None,
        'project_type': None, 'budget': None, 'timeline': None, 'source': None,
        'source_icon': None, 'score': 0, 'status': 'new', 'notes': None,
        'ai_qualified': None, 'ai_qualification_reason': None,
        'ai_processed': False, 'ai_analysis': None, 'assigned_to': None,
    },
    'calls': {
        'lead_id': None, 'scheduled_at': None, 'duration': 30, 'title': None,
        'notes': None, 'completed': False, 'attendees': [], 'ai_scheduled': False,
        'ai_summary': None, 'follow_up_needed': False, 'follow_up_date': None,
    },
    'project_types': {
        'name': None, 'description': None, 'min_budget': None, 'average_timeline': None,
    },
    'marketing_channels': {
        'name': None, 'icon': None, 'active': True, 'conversion_rate': None,
    },
    'ai_insights': {
        'title': None, 'description': None, 'type': None, 'icon': None,
        'action': None, 'action_url': None, 'priority': 'medium', 'read': False,
    },
    'stats': {
        'name': None, 'value': None, 'change_percentage': None, 'icon': None,
        'icon_bg': None, 'icon_color': None, 'period': 'week', 'date': None,
    },
    'form_submissions': {
        'form_type': 'contact', 'raw_data': None, 'source': None, 'ip_address': None,
        'user_agent': None, 'status': 'new', 'ai_processed': False,
        'ai_response': None, 'lead_id': None,
    },
}

# column -> parent table
_REFERENCES = {
    'leads': {'assigned_to': 'users'},
    'calls': {'lead_id': 'leads'},
    'form_submissions': {'lead_id': 'leads'},
}

_UNIQUE = {
    'users': 'username',
    'project_types': 'name',
    'marketing_channels': 'name',
}

# ai_insights are write-once apart from `read`, so they carry no updated_at
_NO_UPDATED_AT = {'ai_insights'}


class MemoryStorage(Storage):

    def __init__(self):
        self._lock = threading.RLock()
        self._tables = {name: {} for name in _DEFAULTS}
        self._next_id = {name: 1 for name in _DEFAULTS}

    # ── Internals ────────────────────────────────────────────────────────────

    def _check_references(self, table, record):
        for column, parent in _REFERENCES.get(table, {}).items():
            value = record.get(column)
            if value is not None and value not in self._tables[parent]:
                raise ForeignKeyViolation(f"{table}.{column}={value} references a missing {parent} row")

    def _check_unique(self, table, record, own_id=None):
        column = _UNIQUE.get(table)
        if column is None:
            return
        for other in self._tables[table].values():
            if other['id'] != own_id and other[column] == record.get(column):
                raise DuplicateError(f"{table}.{column} '{record.get(column)}' already exists")

    def _insert(self, table, data):
        with self._lock:
            record = copy.deepcopy(_DEFAULTS[table])
            record.update({k: copy.deepcopy(v) for k, v in data.items() if k in record})
            self._check_references(table, record)
            self._check_unique(table, record)

            now = utcnow()
            record['id'] = self._next_id[table]
            record['created_at'] = now
            if table not in _NO_UPDATED_AT:
                record['updated_at'] = now

            self._next_id[table] += 1
            self._tables[table][record['id']] = record
            return copy.deepcopy(record)

    def _update(self, table, record_id, changes):
        with self._lock:
            current = self._tables[table].get(record_id)
            if current is None:
                return None
            updated = dict(current)
            updated.update({k: copy.deepcopy(v) for k, v in changes.items() if k in _DEFAULTS[table]})
            self._check_references(table, updated)
            self._check_unique(table, updated, own_id=record_id)
            if table not in _NO_UPDATED_AT:
                updated['updated_at'] = utcnow()
            self._tables[table][record_id] = updated
            return copy.deepcopy(updated)

    def _get(self, table, record_id):
        with self._lock:
            record = self._tables[table].get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def _all(self, table):
        with self._lock:
            return [copy.deepcopy(r) for r in self._tables[table].values()]

    @staticmethod
    def _newest_first(records):
        return sorted(records, key=lambda r: (r['created_at'], r['id']), reverse=True)

    @staticmethod
    def _page(records, page, limit):
        offset = (page - 1) * limit
        return records[offset:offset + limit]

    # ── Users ────────────────────────────────────────────────────────────────

    def get_user(self, user_id):
        return self._get('users', user_id)

    def get_user_by_username(self, username):
        return next((u for u in self._all('users') if u['username'] == username), None)

    def list_users(self):
        return sorted(self._all('users'), key=lambda u: u['id'])

    def create_user(self, data):
        return self._insert('users', data)

    # ── Leads ────────────────────────────────────────────────────────────────

    def list_leads(self, page=1, limit=10):
        leads = self._newest_first(self._all('leads'))
        return self._page(leads, page, limit), len(leads)

    def get_lead(self, lead_id):
        return self._get('leads', lead_id)

    def create_lead(self, data):
        return self._insert('leads', data)

    def update_lead(self, lead_id, changes):
        return self._update('leads', lead_id, changes)

    # ── Calls ────────────────────────────────────────────────────────────────

    def list_calls(self, upcoming_only=False):
        calls = self._all('calls')
        if upcoming_only:
            now = utcnow()
            calls = [c for c in calls if c['scheduled_at'] >= now and not c['completed']]
        return sorted(calls, key=lambda c: (c['scheduled_at'], c['id']))

    def get_call(self, call_id):
        return self._get('calls', call_id)

    def create_call(self, data):
        return self._insert('calls', data)

    def update_call(self, call_id, changes):
        return self._update('calls', call_id, changes)

    # ── Catalog ──────────────────────────────────────────────────────────────

    def list_project_types(self):
        return sorted(self._all('project_types'), key=lambda p: p['id'])

    def create_project_type(self, data):
        return self._insert('project_types', data)

    def list_marketing_channels(self):
        return sorted(self._all('marketing_channels'), key=lambda m: m['id'])

    def create_marketing_channel(self, data):
        return self._insert('marketing_channels', data)

    # ── AI insights ──────────────────────────────────────────────────────────

    def list_ai_insights(self):
        return self._newest_first(self._all('ai_insights'))

    def create_ai_insight(self, data):
        return self._insert('ai_insights', data)

    def mark_ai_insight_read(self, insight_id, read=True):
        return self._update('ai_insights', insight_id, {'read': read})

    # ── Stats ────────────────────────────────────────────────────────────────

    def list_stats(self, period='week'):
        stats = [s for s in self._all('stats') if s['period'] == period]
        return sorted(stats, key=lambda s: s['id'])

    def create_stat(self, data):
        return self._insert('stats', data)

    def update_stat(self, stat_id, changes):
        return self._update('stats', stat_id, changes)

    # ── Form submissions ─────────────────────────────────────────────────────

    def list_form_submissions(self, page=1, limit=10):
        submissions = self._newest_first(self._all('form_submissions'))
        return self._page(submissions, page, limit), len(submissions)

    def get_form_submission(self, submission_id):
        return self._get('form_submissions', submission_id)

    def create_form_submission(self, data):
        return self._insert('form_submissions', data)

    def update_form_submission(self, submission_id, changes):
        return self._update('form_submissions', submission_id, changes)

    # ── Transactions ─────────────────────────────────────────────────────────

    @contextmanager
    def atomic(self):
        with self._lock:
            tables = copy.deepcopy(self._tables)
            next_id = dict(self._next_id)
            try:
                yield self
            except Exception:
                self._tables = tables
                self._next_id = next_id
                logger.info("Transaction rolled back")
                raise
