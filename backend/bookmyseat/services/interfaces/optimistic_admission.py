"""
Default gate: admit everything and let the conditional update decide.
"""

from bookmyseat.services.interfaces.admission import AdmissionStrategy


class OptimisticAdmission(AdmissionStrategy):

    async def admit(self, ticket_id: str, quantity: int = 1) -> bool:
        return True

    async def release(self, ticket_id: str, quantity: int = 1) -> None:
        return None

    async def sync(self, ticket_id: str, available: int) -> None:
        return None
