"""
Health routes — liveness probe and circuit breaker status.
"""
import logging

from flask import Blueprint, current_app, jsonify

from leadwell.errors import NotFoundError
from leadwell.services.circuit_breaker import get_all_breakers

logger = logging.getLogger('routes.health')

bp = Blueprint('health', __name__)


@bp.route('/health')
def health_check():
    """Liveness probe for the load balancer."""
    return jsonify({"status": "healthy"}), 200


@bp.route('/api/health')
def api_health():
    """Service status including every circuit breaker."""
    breakers = {name: cb.get_health() for name, cb in get_all_breakers().items()}
    degraded = any(b['state'] != 'closed' for b in breakers.values())
    return jsonify({
        'status': 'degraded' if degraded else 'healthy',
        'storage': current_app.config.get('STORAGE_BACKEND'),
        'breakers': breakers,
    })


@bp.route('/api/health/<name>/reset', methods=['POST'])
def reset_breaker(name):
    """Force a breaker closed, e.g. after the upstream outage is over."""
    breaker = get_all_breakers().get(name)
    if breaker is None:
        raise NotFoundError('Circuit breaker', name)
    breaker.reset()
    return jsonify(breaker.get_health())
