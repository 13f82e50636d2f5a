"""
Dashboard stat routes. Values are computed elsewhere and posted here.
"""
from flask import Blueprint, jsonify, request

from leadwell.errors import NotFoundError
from leadwell.routes.common import get_storage, json_body, parse
from leadwell.schemas import StatCreate, StatOut, StatUpdate, StatsParams, render, render_many

bp = Blueprint('stats', __name__, url_prefix='/api/stats')


@bp.route('', methods=['GET'])
def list_stats():
    params = parse(StatsParams, request.args.to_dict(), 'Invalid stats query')
    return jsonify(render_many(StatOut, get_storage().list_stats(period=params.period)))


@bp.route('', methods=['POST'])
def create_stat():
    body = parse(StatCreate, json_body('Invalid stat data'), 'Invalid stat data')
    stat = get_storage().create_stat(body.model_dump())
    return jsonify(render(StatOut, stat)), 201


@bp.route('/<int:stat_id>', methods=['PATCH'])
def update_stat(stat_id):
    changes = parse(StatUpdate, json_body('Invalid stat data'), 'Invalid stat data')
    stat = get_storage().update_stat(stat_id, changes.model_dump(exclude_unset=True))
    if stat is None:
        raise NotFoundError('Stat', stat_id)
    return jsonify(render(StatOut, stat))
