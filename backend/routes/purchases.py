# backend/routes/purchases.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.purchase import PosPurchase
from models.users import User
from schemas import purchase as purchase_schemas
from utils.audit import write_log
from utils.pos_writer import PosValidationError, PurchaseLine, commit_purchase, receive_purchase
from utils.tokenJWT import get_pos_user

router = APIRouter(prefix="/pos/purchases", tags=["POS Purchases"])
logger = logging.getLogger(__name__)


@router.post("", response_model=purchase_schemas.PurchaseOut, status_code=201)
def create_purchase(
    payload: purchase_schemas.PurchaseCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    admin_id = current_user.tenant_id
    ip = request.client.host if request.client else None
    lines = [PurchaseLine(it.product_id, it.quantity, it.purchase_price) for it in payload.items]

    try:
        result = commit_purchase(
            db, admin_id=admin_id, supplier_name=payload.supplier_name,
            lines=lines, status=payload.status, notes=payload.notes,
        )
    except PosValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception("Failed to commit purchase for admin %s", admin_id)
        write_log(db, user_id=current_user.id, admin_id=admin_id, action="PURCHASE_CREATE",
                  resource="purchases", status="FAIL", ip=ip, meta={"reason": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    purchase = result.record
    write_log(
        db, user_id=current_user.id, admin_id=admin_id, action="PURCHASE_CREATE", resource="purchases",
        status="SUCCESS", ip=ip,
        meta={"purchase_id": purchase.id, "invoice_number": purchase.invoice_number,
              "invoice_fallback": result.invoice.fallback},
    )
    return purchase


@router.get("", response_model=purchase_schemas.PurchaseListPage)
def list_purchases(
    status: Optional[str] = Query(None, pattern="^(received|pending)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    query = db.query(PosPurchase).filter(PosPurchase.admin_id == current_user.tenant_id)
    if status:
        query = query.filter(PosPurchase.status == status)
    query = query.order_by(PosPurchase.created_at.desc(), PosPurchase.id.desc())
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("/{purchase_id}/receive", response_model=purchase_schemas.PurchaseOut)
def receive_pending_purchase(
    purchase_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    admin_id = current_user.tenant_id
    try:
        purchase = receive_purchase(db, admin_id=admin_id, purchase_id=purchase_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Purchase not found")
    except PosValidationError as e:
        raise HTTPException(status_code=409, detail=str(e))

    write_log(
        db, user_id=current_user.id, admin_id=admin_id, action="PURCHASE_RECEIVE", resource="purchases",
        status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"purchase_id": purchase.id, "invoice_number": purchase.invoice_number},
    )
    return purchase
