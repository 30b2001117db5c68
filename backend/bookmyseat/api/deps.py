"""
Request-scoped service wiring.

Stores are built around the request's session and handed to the services
explicitly; nothing reaches for a module-level handle.
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookmyseat.db.session import get_db
from bookmyseat.services.booking_ledger import BookingLedger
from bookmyseat.services.catalog_service import CatalogService
from bookmyseat.services.interfaces.admission import AdmissionStrategy
from bookmyseat.services.strategy_factory import get_admission
from bookmyseat.stores.sql_store import SqlBookingStore, SqlTicketStore


async def get_booking_ledger(
    db: AsyncSession = Depends(get_db),
    admission: AdmissionStrategy = Depends(get_admission),
) -> AsyncGenerator[BookingLedger, None]:
    """
    Commits the request's work itself so that a failed commit can return
    the gate units its reservations took.
    """
    ledger = BookingLedger(SqlTicketStore(db), SqlBookingStore(db), admission)
    try:
        yield ledger
        await db.commit()
    except BaseException:
        await ledger.release_admitted()
        raise


def get_catalog(
    db: AsyncSession = Depends(get_db),
    admission: AdmissionStrategy = Depends(get_admission),
) -> CatalogService:
    return CatalogService(SqlTicketStore(db), SqlBookingStore(db), admission)
