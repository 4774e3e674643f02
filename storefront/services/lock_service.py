import redis
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare and delete in one lua call, nobody can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    -checkout submission lock per buyer (one Pay click in flight)
    -lock expires by itself after the ttl, a hung request cannot block the buyer forever
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(buyer_key: str) -> str:
        return f"checkout:{buyer_key}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, buyer_key: str, token: str, ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> bool:
        key = self._key(buyer_key)
        logger.info(f"Acquire lock {key}")
        #SET checkout:0700111222:lock "<token>" NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_checkout_lock(self, buyer_key: str, token: str) -> bool:
        key = self._key(buyer_key)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
