# backend/utils/invoice_numbers.py
import logging
import time
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.counter import InvoiceCounter

logger = logging.getLogger(__name__)

INVOICE_PREFIXES = {"sale": "S", "purchase": "P", "adjustment": "AD"}


class ReservedInvoice(NamedTuple):
    number: str
    sequence: Optional[int]
    fallback: bool


def _prefix(kind: str) -> str:
    try:
        return INVOICE_PREFIXES[kind]
    except KeyError:
        raise ValueError(f"Unknown invoice type: {kind}")


# S01, S02 ... S99, S100
def format_invoice_number(kind: str, number: int) -> str:
    return f"{_prefix(kind)}{number:02d}"


# Prefix + last four digits of the epoch in ms. Not unique.
def fallback_invoice_number(kind: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{_prefix(kind)}{str(now_ms)[-4:]}"


def current_count(db: Session, admin_id: int, kind: str) -> int:
    value = db.query(InvoiceCounter.count).filter(
        InvoiceCounter.admin_id == admin_id, InvoiceCounter.type == kind
    ).scalar()
    return value or 0


def _increment(db: Session, admin_id: int, kind: str, now: datetime) -> int:
    result = db.execute(
        update(InvoiceCounter)
        .where(InvoiceCounter.admin_id == admin_id, InvoiceCounter.type == kind)
        .values(count=InvoiceCounter.count + 1, updated_at=now)
    )
    return result.rowcount


def reserve_invoice_number(db: Session, admin_id: int, kind: str) -> ReservedInvoice:
    """
    Take the next number from the tenant's counter and commit it.

    The increment is a single UPDATE, so concurrent callers queue on the
    counter row and each get their own value. A missing counter starts at 1.
    If the database fails, a timestamp-based number is returned instead and
    `fallback` is set; such numbers may repeat.

    Commits the session, so call it before staging other changes.
    """
    _prefix(kind)
    now = datetime.now(timezone.utc)
    try:
        if not _increment(db, admin_id, kind, now):
            try:
                db.add(InvoiceCounter(admin_id=admin_id, type=kind, count=1, updated_at=now))
                db.flush()
            except IntegrityError:
                # Another request created the counter first
                db.rollback()
                if not _increment(db, admin_id, kind, now):
                    raise
        sequence = current_count(db, admin_id, kind)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Invoice counter '%s' failed for admin %s, using fallback number", kind, admin_id)
        return ReservedInvoice(fallback_invoice_number(kind), None, True)

    return ReservedInvoice(format_invoice_number(kind, sequence), sequence, False)
