"""
Admission gate interface.

A gate may turn a reservation away before it reaches the database, but it
never grants one: the ticket row's conditional update stays authoritative.
"""

from abc import ABC, abstractmethod


class AdmissionStrategy(ABC):
    """
    Implementations:
    - OptimisticAdmission: no pre-check, the database decides
    - RedisAdmission: atomic counter in Redis rejects sold-out tickets early
    """

    @abstractmethod
    async def admit(self, ticket_id: str, quantity: int = 1) -> bool:
        """
        True to let the reservation proceed to the database, False to fail
        fast with InsufficientInventoryError.
        """

    @abstractmethod
    async def release(self, ticket_id: str, quantity: int = 1) -> None:
        """Hand units back after a failed reservation, a rejection or a cancellation."""

    @abstractmethod
    async def sync(self, ticket_id: str, available: int) -> None:
        """Overwrite the gate's view with the database's remaining quantity."""

    async def close(self) -> None:
        """Release connections held by the gate."""
