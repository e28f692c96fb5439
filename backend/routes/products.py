# backend/routes/products.py
from datetime import datetime, timezone
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_pos_user
from utils.audit import write_log
from models.users import User
from models.product import PosProduct
import schemas.product as product_schemas

router = APIRouter(prefix="/pos/products", tags=["POS Products"])


def _norm_sku(sku: Optional[str]) -> Optional[str]:
    if sku is None:
        return None
    s = sku.strip().upper()
    return s if s else None


def get_tenant_product(db: Session, admin_id: int, product_id: int) -> PosProduct:
    product = db.query(PosProduct).filter(
        PosProduct.admin_id == admin_id, PosProduct.id == product_id
    ).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# =========================
# PRODUCT LIST / SEARCH
# =========================
@router.get("", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None, description="Search by name, SKU or barcode"),
    in_stock: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    query = db.query(PosProduct).filter(PosProduct.admin_id == current_user.tenant_id)

    if q and q.strip():
        like = f"%{q.strip()}%"
        query = query.filter(or_(
            PosProduct.name.ilike(like), PosProduct.sku.ilike(like), PosProduct.barcode.ilike(like)
        ))
    if in_stock:
        query = query.filter(PosProduct.stock_qty > 0)

    query = query.order_by(PosProduct.name.asc())
    total = query.count()
    items: List[PosProduct] = query.offset((page - 1) * page_size).limit(page_size).all()

    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    return get_tenant_product(db, current_user.tenant_id, product_id)


@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    admin_id = current_user.tenant_id
    sku = _norm_sku(payload.sku)
    if sku is None:
        raise HTTPException(status_code=400, detail="SKU cannot be empty")
    exists = db.query(PosProduct).filter(PosProduct.admin_id == admin_id, PosProduct.sku == sku).first()
    if exists:
        raise HTTPException(status_code=409, detail="Product SKU already exists")

    data = payload.model_dump()
    data["sku"] = sku
    new_product = PosProduct(admin_id=admin_id, **data)
    db.add(new_product)
    db.commit()
    db.refresh(new_product)

    write_log(
        db, user_id=current_user.id, admin_id=admin_id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"id": new_product.id, "sku": new_product.sku},
    )
    return new_product


@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    admin_id = current_user.tenant_id
    product = get_tenant_product(db, admin_id, product_id)

    # barcode and reorder_level may be cleared; the other columns are required
    data = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k in ("barcode", "reorder_level")
    }
    if "sku" in data:
        data["sku"] = _norm_sku(data["sku"])
        if data["sku"] is None:
            raise HTTPException(status_code=400, detail="SKU cannot be empty")
        clash = db.query(PosProduct).filter(
            PosProduct.admin_id == admin_id, PosProduct.sku == data["sku"], PosProduct.id != product.id
        ).first()
        if clash:
            raise HTTPException(status_code=409, detail="Product SKU already exists")

    for key, value in data.items():
        setattr(product, key, value)
    product.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, admin_id=admin_id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"id": product.id, "fields": sorted(data)},
    )
    return product
