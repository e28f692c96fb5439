# backend/routes/adjustments.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.adjustment import StockAdjustment
from models.users import User
from schemas import adjustment as adjustment_schemas
from utils.audit import write_log
from utils.pos_writer import (
    ADJUSTMENT_REASONS,
    AdjustmentLine,
    InsufficientStockError,
    PosValidationError,
    commit_adjustment,
)
from utils.tokenJWT import get_pos_user

router = APIRouter(prefix="/pos/stock-adjustments", tags=["POS Stock Adjustments"])
logger = logging.getLogger(__name__)


@router.get("/reasons")
def list_reasons(current_user: User = Depends(get_pos_user)):
    return list(ADJUSTMENT_REASONS)


@router.post("", response_model=adjustment_schemas.AdjustmentOut, status_code=201)
def create_adjustment(
    payload: adjustment_schemas.AdjustmentCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    admin_id = current_user.tenant_id
    ip = request.client.host if request.client else None
    lines = [AdjustmentLine(it.product_id, it.adjustment_type, it.quantity) for it in payload.items]

    try:
        result = commit_adjustment(
            db, admin_id=admin_id, lines=lines, reason=payload.reason,
            notes=payload.notes, user_id=current_user.id,
        )
    except (PosValidationError, InsufficientStockError) as e:
        write_log(db, user_id=current_user.id, admin_id=admin_id, action="STOCK_ADJUSTMENT",
                  resource="stock", status="FAIL", ip=ip, meta={"reason": str(e)})
        code = 409 if isinstance(e, InsufficientStockError) else 400
        raise HTTPException(status_code=code, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception("Failed to commit stock adjustment for admin %s", admin_id)
        write_log(db, user_id=current_user.id, admin_id=admin_id, action="STOCK_ADJUSTMENT",
                  resource="stock", status="FAIL", ip=ip, meta={"reason": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    adjustment = result.record
    write_log(
        db, user_id=current_user.id, admin_id=admin_id, action="STOCK_ADJUSTMENT", resource="stock",
        status="SUCCESS", ip=ip,
        meta={"adjustment_id": adjustment.id, "adjustment_number": adjustment.adjustment_number,
              "invoice_fallback": result.invoice.fallback},
    )
    return adjustment


@router.get("", response_model=adjustment_schemas.AdjustmentListPage)
def list_adjustments(
    reason: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    query = db.query(StockAdjustment).filter(StockAdjustment.admin_id == current_user.tenant_id)
    if reason:
        query = query.filter(StockAdjustment.reason == reason)
    query = query.order_by(StockAdjustment.created_at.desc(), StockAdjustment.id.desc())
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return {"items": items, "total": total, "page": page, "page_size": page_size}
