"""
Shared client instances — Redis, OpenAI.

Importing this module never touches the network: the Redis client connects
lazily, and the OpenAI client only holds credentials until the first request.
"""
import logging
import redis
from openai import OpenAI

from leadwell.config import REDIS_URL, OPENAI_API_KEY, OPENAI_TIMEOUT_SECONDS
from leadwell.errors import ConfigurationError

logger = logging.getLogger('leadwell.extensions')

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True, socket_timeout=2)


# ── OpenAI ────────────────────────────────────────────────────────────────────
def build_openai_client(api_key, timeout):
    """
    Single attempt with a bounded timeout: a hung model call stalls only its
    own request, and for at most `timeout` seconds.

    Returns None without a key (validate_config() rejects that at startup);
    a key the SDK refuses is a ConfigurationError.
    """
    if not api_key:
        logger.warning("OPENAI_API_KEY not set")
        return None
    try:
        client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
    except Exception as e:
        raise ConfigurationError(f"Could not initialize the OpenAI client: {e}") from e
    logger.info("OpenAI client initialized (timeout=%ss)", timeout)
    return client


openai_client = build_openai_client(OPENAI_API_KEY, OPENAI_TIMEOUT_SECONDS)
