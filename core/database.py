import logging

from redis.asyncio import Redis

from core.cache import RedisConversationStore
from core.config import CONVERSATION_BACKEND, CONVERSATION_TTL, REDIS_URL
from core.store import InMemoryConversationStore, UserStore

logger = logging.getLogger(__name__)

# =============================================================================
# CONNECTION SETUP
# =============================================================================

async def create_redis_client(url: str = REDIS_URL):
    """Create Redis client"""
    redis = Redis.from_url(
        url,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    await redis.ping()  # fail fast if the URL or creds are wrong
    return redis

# =============================================================================
# STORES
# =============================================================================

async def create_conversation_store(backend: str = CONVERSATION_BACKEND):
    """Create the conversation store selected by configuration"""
    if backend == "redis":
        logger.info("Using Redis conversation store at %s", REDIS_URL)
        return RedisConversationStore(await create_redis_client(), ttl=CONVERSATION_TTL)
    if backend != "memory":
        raise ValueError(f"Unknown conversation backend: {backend}")
    logger.info("Using in-memory conversation store")
    return InMemoryConversationStore()

def create_user_store():
    """Create the mock user store"""
    return UserStore()
