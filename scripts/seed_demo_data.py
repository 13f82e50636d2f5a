#!/usr/bin/env python3
"""
Seed demo data for the dashboard.

Creates a small construction-company workspace:
  1. Team members (sales, estimating)
  2. Project types and marketing channels
  3. Leads across every source/project type, scored by the heuristic only
  4. Upcoming and completed calls
  5. Weekly dashboard stats

Usage:
    python scripts/seed_demo_data.py          # seed into DATABASE_URL
    python scripts/seed_demo_data.py --clear  # drop and recreate tables first

No model calls are made; DATABASE_URL defaults to sqlite:///local.db.
"""
import sys
import os
import argparse
from datetime import date, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.security import generate_password_hash

from leadwell.database import Base, engine, import_models, init_db, utcnow
from leadwell.pipeline.scoring import clamp_score, heuristic_score
from leadwell.storage.sql import SqlStorage


USERS = [
    {'username': 'jmartinez', 'name': 'Julia Martinez', 'role': 'Sales Manager', 'department': 'Sales'},
    {'username': 'dokafor',   'name': 'David Okafor',   'role': 'Estimator',     'department': 'Pre-construction'},
]

PROJECT_TYPES = [
    {'name': 'Residential Renovation', 'min_budget': 25000,   'average_timeline': '2-4 months'},
    {'name': 'Commercial Office',      'min_budget': 250000,  'average_timeline': '6-12 months'},
    {'name': 'Industrial Facility',    'min_budget': 1000000, 'average_timeline': '12-24 months'},
    {'name': 'Residential New Build',  'min_budget': 300000,  'average_timeline': '8-14 months'},
]

CHANNELS = [
    {'name': 'Website',   'icon': 'ri-global-line',   'conversion_rate': 12},
    {'name': 'Referrals', 'icon': 'ri-user-shared-line', 'conversion_rate': 34},
    {'name': 'LinkedIn',  'icon': 'ri-linkedin-box-line', 'conversion_rate': 18},
    {'name': 'Google',    'icon': 'ri-google-line',   'conversion_rate': 9},
    {'name': 'Facebook',  'icon': 'ri-facebook-box-line', 'conversion_rate': 6},
]

LEADS = [
    {'name': 'Sarah Whitfield', 'email': 'sarah@whitfieldlaw.com', 'phone': '555-0142', 'company': 'Whitfield Law',
     'project_type': 'Commercial Office', 'budget': 480000, 'timeline': 'Q3', 'source': 'Referrals', 'status': 'qualified'},
    {'name': 'Tom Brennan', 'email': 'tom.brennan@gmail.com', 'phone': '555-0199', 'company': None,
     'project_type': 'Residential Renovation', 'budget': 60000, 'timeline': 'Next month', 'source': 'Website', 'status': 'new'},
    {'name': 'Priya Natarajan', 'email': 'priya@northsidelogistics.com', 'phone': None, 'company': 'Northside Logistics',
     'project_type': 'Industrial Facility', 'budget': 2200000, 'timeline': '2025', 'source': 'LinkedIn', 'status': 'contacted'},
    {'name': 'Marco Bellini', 'email': 'marco.b@outlook.com', 'phone': '555-0107', 'company': None,
     'project_type': 'Residential New Build', 'budget': 650000, 'timeline': 'Spring', 'source': 'Google', 'status': 'in-progress'},
    {'name': 'Alice Kim', 'email': 'alice@kimdental.com', 'phone': '555-0175', 'company': 'Kim Dental',
     'project_type': 'Commercial Office', 'budget': 320000, 'timeline': 'ASAP', 'source': 'Facebook', 'status': 'won'},
    {'name': 'Greg Holt', 'email': 'greg.holt@yahoo.com', 'phone': None, 'company': None,
     'project_type': 'Other', 'budget': None, 'timeline': None, 'source': 'Website', 'status': 'new'},
]

STATS = [
    {'name': 'New Leads',       'value': '24',    'change_percentage': 12,  'icon': 'ri-user-add-line',      'icon_bg': 'bg-blue-100',   'icon_color': 'text-blue-600'},
    {'name': 'Qualified Leads', 'value': '9',     'change_percentage': 5,   'icon': 'ri-shield-check-line',  'icon_bg': 'bg-green-100',  'icon_color': 'text-green-600'},
    {'name': 'Calls Scheduled', 'value': '14',    'change_percentage': -3,  'icon': 'ri-calendar-line',      'icon_bg': 'bg-purple-100', 'icon_color': 'text-purple-600'},
    {'name': 'Pipeline Value',  'value': '$3.7M', 'change_percentage': 18,  'icon': 'ri-money-dollar-circle-line', 'icon_bg': 'bg-amber-100', 'icon_color': 'text-amber-600'},
]


def seed(storage):
    users = [
        storage.create_user({**u, 'password_hash': generate_password_hash('changeme123')})
        for u in USERS
    ]
    print(f'  users:              {len(users)}')

    for pt in PROJECT_TYPES:
        storage.create_project_type(pt)
    for channel in CHANNELS:
        storage.create_marketing_channel(channel)
    print(f'  project types:      {len(PROJECT_TYPES)}')
    print(f'  marketing channels: {len(CHANNELS)}')

    leads = []
    for i, data in enumerate(LEADS):
        icon = next((c['icon'] for c in CHANNELS if c['name'] == data['source']), None)
        leads.append(storage.create_lead({
            **data,
            'source_icon': icon,
            'score': clamp_score(heuristic_score(data) * 100),
            'assigned_to': users[i % len(users)]['id'],
        }))
    print(f'  leads:              {len(leads)}')

    now = utcnow()
    attendees = [{'id': u['id'], 'name': u['name'], 'role': u['role']} for u in users]
    storage.create_call({
        'lead_id': leads[0]['id'], 'title': 'Initial Consultation - Commercial Office',
        'scheduled_at': now + timedelta(days=1, hours=2), 'attendees': attendees,
    })
    storage.create_call({
        'lead_id': leads[2]['id'], 'title': 'Site Walkthrough', 'duration': 60,
        'scheduled_at': now + timedelta(days=3), 'attendees': attendees[1:],
    })
    storage.create_call({
        'lead_id': leads[4]['id'], 'title': 'Contract Review', 'completed': True,
        'scheduled_at': now - timedelta(days=2), 'follow_up_needed': True,
        'follow_up_date': now + timedelta(days=5),
    })
    print('  calls:              3')

    for stat in STATS:
        storage.create_stat({**stat, 'period': 'week', 'date': date.today()})
    print(f'  stats:              {len(STATS)}')


def main():
    parser = argparse.ArgumentParser(description='Seed demo data for the dashboard')
    parser.add_argument('--clear', action='store_true', help='Drop and recreate all tables before seeding')
    args = parser.parse_args()

    if args.clear:
        import_models()
        Base.metadata.drop_all(engine)
    init_db()

    storage = SqlStorage()
    print('Seeding demo data...')
    with storage.atomic() as tx:
        seed(tx)
    print('\nDone! Try GET /api/leads.')


if __name__ == '__main__':
    main()
