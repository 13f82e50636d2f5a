"""
Reference data routes — project types, marketing channels, team members.
"""
import logging

from flask import Blueprint, jsonify
from werkzeug.security import generate_password_hash

from leadwell.errors import NotFoundError
from leadwell.routes.common import get_storage, json_body, parse
from leadwell.schemas import (
    MarketingChannelCreate, MarketingChannelOut, ProjectTypeCreate, ProjectTypeOut,
    UserCreate, UserOut, render, render_many,
)

logger = logging.getLogger('routes.catalog')

bp = Blueprint('catalog', __name__, url_prefix='/api')


# ── Project types ────────────────────────────────────────────────────────────

@bp.route('/project-types', methods=['GET'])
def list_project_types():
    return jsonify(render_many(ProjectTypeOut, get_storage().list_project_types()))


@bp.route('/project-types', methods=['POST'])
def create_project_type():
    body = parse(ProjectTypeCreate, json_body('Invalid project type data'), 'Invalid project type data')
    project_type = get_storage().create_project_type(body.model_dump())
    return jsonify(render(ProjectTypeOut, project_type)), 201


# ── Marketing channels ───────────────────────────────────────────────────────

@bp.route('/marketing-channels', methods=['GET'])
def list_marketing_channels():
    return jsonify(render_many(MarketingChannelOut, get_storage().list_marketing_channels()))


@bp.route('/marketing-channels', methods=['POST'])
def create_marketing_channel():
    body = parse(MarketingChannelCreate, json_body('Invalid marketing channel data'), 'Invalid marketing channel data')
    channel = get_storage().create_marketing_channel(body.model_dump())
    return jsonify(render(MarketingChannelOut, channel)), 201


# ── Users ────────────────────────────────────────────────────────────────────

@bp.route('/users', methods=['GET'])
def list_users():
    return jsonify(render_many(UserOut, get_storage().list_users()))


@bp.route('/users/<int:user_id>', methods=['GET'])
def get_user(user_id):
    user = get_storage().get_user(user_id)
    if user is None:
        raise NotFoundError('User', user_id)
    return jsonify(render(UserOut, user))


@bp.route('/users', methods=['POST'])
def create_user():
    """Team member record. The password is stored hashed and never returned."""
    body = parse(UserCreate, json_body('Invalid user data'), 'Invalid user data')
    data = body.model_dump(exclude={'password'})
    data['password_hash'] = generate_password_hash(body.password)
    user = get_storage().create_user(data)
    logger.info("User %s created (%s)", user['id'], user['username'])
    return jsonify(render(UserOut, user)), 201
