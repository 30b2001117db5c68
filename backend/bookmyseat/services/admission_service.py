"""
Redis admission gate for high-contention tickets.

Keeps `tickets:available:{id}` as a mirror of the ticket's remaining
quantity and decrements it with a Lua script, so flash-sale traffic for a
sold-out ticket is turned away without touching PostgreSQL.

Circuit breaker:
  Any Redis failure fails open (admit). The database conditional update
  still prevents oversell; the gate only saves load.
  A key that was never synced also admits.
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from bookmyseat.core.logging import get_logger
from bookmyseat.core.metrics import record_admission, redis_connection_errors
from bookmyseat.services.interfaces.admission import AdmissionStrategy

logger = get_logger(__name__)

# KEYS[1] = counter, ARGV[1] = requested units
# -1: counter unknown, 0: not enough, 1: admitted and decremented
ADMIT_SCRIPT = """
local available = redis.call('GET', KEYS[1])
if not available then
    return -1
end
local wanted = tonumber(ARGV[1])
if tonumber(available) < wanted then
    return 0
end
redis.call('DECRBY', KEYS[1], wanted)
return 1
"""

RELEASE_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('INCRBY', KEYS[1], ARGV[1])
end
return -1
"""


def availability_key(ticket_id: str) -> str:
    return f"tickets:available:{ticket_id}"


class RedisAdmission(AdmissionStrategy):

    def __init__(self, client: Redis):
        self.redis = client
        self._admit = client.register_script(ADMIT_SCRIPT)
        self._release = client.register_script(RELEASE_SCRIPT)

    async def admit(self, ticket_id: str, quantity: int = 1) -> bool:
        try:
            result = await self._admit(keys=[availability_key(ticket_id)], args=[quantity])
        except RedisError as e:
            redis_connection_errors.inc()
            logger.warning("admission_fail_open", ticket_id=ticket_id, error=str(e))
            return True

        admitted = int(result) != 0
        record_admission(admitted)
        if not admitted:
            logger.info("admission_rejected", ticket_id=ticket_id, requested=quantity)
        return admitted

    async def release(self, ticket_id: str, quantity: int = 1) -> None:
        try:
            await self._release(keys=[availability_key(ticket_id)], args=[quantity])
        except RedisError as e:
            redis_connection_errors.inc()
            logger.warning("admission_release_failed", ticket_id=ticket_id, error=str(e))

    async def sync(self, ticket_id: str, available: int) -> None:
        try:
            await self.redis.set(availability_key(ticket_id), available)
        except RedisError as e:
            redis_connection_errors.inc()
            logger.warning("admission_sync_failed", ticket_id=ticket_id, error=str(e))

    async def close(self) -> None:
        await self.redis.aclose()
