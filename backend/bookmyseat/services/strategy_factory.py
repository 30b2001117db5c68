"""
Admission strategy factory.

The gate is built once in the application lifespan and stored on
`app.state.admission`; request handlers reach it through `get_admission`.
"""

from starlette.requests import Request

from bookmyseat.core.config import Settings
from bookmyseat.infrastructure.redis_client import create_redis
from bookmyseat.services.admission_service import RedisAdmission
from bookmyseat.services.interfaces.admission import AdmissionStrategy
from bookmyseat.services.interfaces.optimistic_admission import OptimisticAdmission


def build_admission_strategy(settings: Settings) -> AdmissionStrategy:
    """
    ADMISSION_STRATEGY=redis selects the Redis gate; anything else
    (default "optimistic") leaves every decision to the database.
    """
    if settings.ADMISSION_STRATEGY.lower() == "redis":
        return RedisAdmission(create_redis(settings.REDIS_URL))
    return OptimisticAdmission()


def get_admission(request: Request) -> AdmissionStrategy:
    strategy = getattr(request.app.state, "admission", None)
    if strategy is None:
        # The lifespan did not run (e.g. an ASGI test transport)
        strategy = OptimisticAdmission()
        request.app.state.admission = strategy
    return strategy
