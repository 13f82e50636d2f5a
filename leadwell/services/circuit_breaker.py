"""
Circuit breaker for outbound model calls, with state kept in Redis.

All gunicorn workers share one Redis hash per breaker (`breaker:<name>`):

    state       closed | open | half_open
    failures    consecutive failures since the last success
    opened_at   epoch seconds when the circuit last opened
    ok_total / err_total / last_error   running health counters

An open circuit rejects calls with CircuitOpenError until `reset_timeout`
elapses, then lets a single probe through (half_open). When Redis itself is
unreachable the breaker stays out of the way and calls pass straight through.
"""
import logging
import time

from redis.exceptions import RedisError

from leadwell.errors import CircuitOpenError

logger = logging.getLogger('services.circuit_breaker')

CLOSED = 'closed'
OPEN = 'open'
HALF_OPEN = 'half_open'


class CircuitBreaker:

    def __init__(self, name, redis_client, failure_threshold=5, reset_timeout=60):
        self.name = name
        self.redis = redis_client
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout

    @property
    def key(self):
        return f'breaker:{self.name}'

    def _load(self):
        try:
            return self.redis.hgetall(self.key) or {}
        except RedisError:
            logger.warning("Breaker '%s': Redis unreachable, failing open", self.name)
            return {}

    def _write(self, **fields):
        try:
            self.redis.hset(self.key, mapping={k: str(v) for k, v in fields.items()})
        except RedisError:
            pass

    def _bump(self, field):
        try:
            self.redis.hincrby(self.key, field, 1)
        except RedisError:
            pass

    @property
    def state(self):
        data = self._load()
        current = data.get('state', CLOSED)
        if current == OPEN and self._cooled_down(data):
            return HALF_OPEN
        return current

    def _cooled_down(self, data):
        opened_at = float(data.get('opened_at') or 0)
        return time.time() - opened_at >= self.reset_timeout

    def call(self, func, *args, **kwargs):
        """Run func through the breaker, recording the outcome."""
        data = self._load()
        if data.get('state') == OPEN:
            if not self._cooled_down(data):
                opened_at = float(data.get('opened_at') or 0)
                retry_after = max(0.0, self.reset_timeout - (time.time() - opened_at))
                raise CircuitOpenError(self.name, retry_after=retry_after)
            self._write(state=HALF_OPEN)

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._on_failure(e)
            raise
        self._on_success()
        return result

    def _on_success(self):
        self._write(state=CLOSED, failures=0)
        self._bump('ok_total')

    def _on_failure(self, error):
        self._bump('err_total')
        self._write(last_error=str(error)[:200])
        try:
            failures = self.redis.hincrby(self.key, 'failures', 1)
        except RedisError:
            return
        half_open = self._load().get('state') == HALF_OPEN
        if half_open or failures >= self.failure_threshold:
            self._write(state=OPEN, opened_at=time.time())
            logger.warning(
                "Circuit '%s' OPEN after %d consecutive failures: %s",
                self.name, failures, error,
            )
        else:
            logger.info("Circuit '%s' failure %d/%d: %s", self.name, failures, self.failure_threshold, error)

    def get_health(self):
        data = self._load()
        return {
            'name': self.name,
            'state': self.state,
            'failures': int(data.get('failures') or 0),
            'failure_threshold': self.failure_threshold,
            'reset_timeout': self.reset_timeout,
            'total_success': int(data.get('ok_total') or 0),
            'total_failure': int(data.get('err_total') or 0),
            'last_error': data.get('last_error', ''),
        }

    def reset(self):
        """Force the circuit closed and clear the failure streak."""
        self._write(state=CLOSED, failures=0, opened_at=0)
        logger.info("Circuit '%s' manually reset", self.name)


_registry = {}


def get_breaker(name):
    """Return the registered breaker, creating it with defaults on first use."""
    if name not in _registry:
        from leadwell.extensions import redis_client
        _registry[name] = CircuitBreaker(name, redis_client)
    return _registry[name]


def get_all_breakers():
    return dict(_registry)


def init_breakers(redis_client):
    """Register the breakers for every external service this app calls."""
    _registry['openai'] = CircuitBreaker('openai', redis_client, failure_threshold=5, reset_timeout=60)
    return dict(_registry)
