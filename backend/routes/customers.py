# backend/routes/customers.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_pos_user
from utils.audit import write_log
from models.users import User
from models.customer import Customer
from schemas import customer as customer_schemas

router = APIRouter(prefix="/pos/customers", tags=["POS Customers"])


@router.get("", response_model=customer_schemas.CustomerListPage)
def list_customers(
    q: Optional[str] = Query(None, description="Search by name, email or phone"),
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    query = db.query(Customer).filter(Customer.admin_id == current_user.tenant_id)
    if q and q.strip():
        like = f"%{q.strip()}%"
        query = query.filter(or_(Customer.name.ilike(like), Customer.email.ilike(like), Customer.phone.ilike(like)))

    query = query.order_by(Customer.name.asc())
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=customer_schemas.CustomerOut, status_code=status.HTTP_201_CREATED)
def add_customer(
    payload: customer_schemas.CustomerCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    customer = Customer(
        admin_id=current_user.tenant_id,
        name=payload.name.strip(),
        email=(payload.email or "").strip() or None,
        phone=(payload.phone or "").strip() or None,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)

    write_log(
        db, user_id=current_user.id, admin_id=current_user.tenant_id, action="CUSTOMER_CREATE",
        resource="customers", status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"id": customer.id},
    )
    return customer
