# backend/routes/sales.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import FileResponse
from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.customer import Customer
from models.sale import PosSale
from models.users import User
from routes.cart import cart_to_out
from schemas import sale as sale_schemas
from utils.audit import write_log
from utils.cart import CartError, SaleCart
from utils.invoice_numbers import INVOICE_PREFIXES, current_count, format_invoice_number
from utils.pdf import generate_sale_invoice_pdf, get_pdf_path
from utils.pos_writer import DEFAULT_CUSTOMER_NAME, InsufficientStockError, PosValidationError, commit_sale
from utils.submission import SubmissionInProgress, state_to_dict, tracker
from utils.tokenJWT import get_pos_user

router = APIRouter(tags=["POS Sales"])
logger = logging.getLogger(__name__)


def _client_ip(request: Request):
    return request.client.host if request.client else None


def _submission_key(user: User):
    return (user.tenant_id, user.id)


def _get_tenant_sale(db: Session, admin_id: int, sale_id: int) -> PosSale:
    sale = db.query(PosSale).filter(PosSale.admin_id == admin_id, PosSale.id == sale_id).first()
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return sale


# =========================
# COMMIT SALE
# =========================
@router.post("/pos/sales", response_model=sale_schemas.SaleCommitResponse, status_code=201)
def create_sale(
    payload: sale_schemas.SaleCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    admin_id = current_user.tenant_id

    # Validation happens before the submission starts and before any write
    try:
        cart = SaleCart.from_lines(payload.lines)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if cart.is_empty:
        raise HTTPException(status_code=400, detail="Please add at least one product to the sale")

    customer_name = payload.customer_name
    customer_ref = None
    if payload.customer_id is not None:
        customer = db.query(Customer).filter(
            Customer.admin_id == admin_id, Customer.id == payload.customer_id
        ).first()
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        customer_ref = str(customer.id)
        if not customer_name.strip() or customer_name == DEFAULT_CUSTOMER_NAME:
            customer_name = customer.name

    key = _submission_key(current_user)
    try:
        tracker.begin(key)
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))

    try:
        result = commit_sale(
            db,
            admin_id=admin_id,
            cart=cart,
            customer_name=customer_name,
            payment_method=payload.payment_method,
            notes=payload.notes,
            customer_id=customer_ref,
        )
    except (PosValidationError, InsufficientStockError) as e:
        tracker.fail(key, str(e))
        write_log(db, user_id=current_user.id, admin_id=admin_id, action="SALE_CREATE", resource="sales",
                  status="FAIL", ip=_client_ip(request), meta={"reason": str(e)})
        code = 409 if isinstance(e, InsufficientStockError) else 400
        raise HTTPException(status_code=code, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception("Failed to commit sale for admin %s", admin_id)
        tracker.fail(key, str(e))
        write_log(db, user_id=current_user.id, admin_id=admin_id, action="SALE_CREATE", resource="sales",
                  status="FAIL", ip=_client_ip(request), meta={"reason": str(e)})
        raise HTTPException(status_code=500, detail=str(e) or "Failed to process sale. Please try again.")

    sale = result.record
    tracker.succeed(key, sale.invoice_number, sale.id)
    write_log(
        db, user_id=current_user.id, admin_id=admin_id, action="SALE_CREATE", resource="sales",
        status="SUCCESS", ip=_client_ip(request),
        meta={
            "sale_id": sale.id,
            "invoice_number": sale.invoice_number,
            "invoice_fallback": result.invoice.fallback,
            "total_amount": sale.total_amount,
        },
    )

    cart.clear()
    return {
        "sale": sale,
        "message": (
            f"Sale completed successfully! Invoice: {sale.invoice_number} | "
            f"Total: {settings.CURRENCY_SYMBOL}{sale.total_amount:.2f}"
        ),
        "cart": cart_to_out(cart),
        "redirect_to": settings.SALES_REDIRECT_PATH,
        "redirect_after_ms": settings.SALES_REDIRECT_DELAY_MS,
    }


@router.get("/pos/sales/submission", response_model=sale_schemas.SubmissionStateOut)
def get_submission_state(current_user: User = Depends(get_pos_user)):
    return state_to_dict(tracker.get(_submission_key(current_user)))


# =========================
# LIST / DETAIL
# =========================
@router.get("/pos/sales", response_model=sale_schemas.SaleListPage)
def list_sales(
    q: Optional[str] = Query(None, description="Search customer, invoice, product name or SKU"),
    payment_method: Optional[sale_schemas.PaymentMethodName] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    query = db.query(PosSale).filter(PosSale.admin_id == current_user.tenant_id)

    if q and q.strip():
        like = f"%{q.strip()}%"
        query = query.filter(or_(
            PosSale.customer_name.ilike(like),
            PosSale.invoice_number.ilike(like),
            cast(PosSale.items, String).ilike(like),
        ))
    if payment_method:
        query = query.filter(PosSale.payment_method == payment_method)

    query = query.order_by(PosSale.created_at.desc(), PosSale.id.desc())
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/pos/sales/{sale_id}", response_model=sale_schemas.SaleOut)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    return _get_tenant_sale(db, current_user.tenant_id, sale_id)


@router.get("/pos/sales/{sale_id}/invoice")
def download_sale_invoice(
    sale_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    # Render the invoice PDF on first request, reuse it afterwards
    sale = _get_tenant_sale(db, current_user.tenant_id, sale_id)
    pdf_path = get_pdf_path(sale.admin_id, sale.id, sale.invoice_number)

    if not pdf_path.exists():
        owner = db.query(User).filter(User.id == sale.admin_id).first()
        seller = None
        if owner:
            full_name = " ".join(p for p in [owner.first_name, owner.last_name] if p)
            seller = {"name": full_name or owner.email, "email": owner.email}
        try:
            generate_sale_invoice_pdf(sale, pdf_path, seller=seller)
        except Exception as e:
            logger.exception("Invoice PDF for sale %s failed", sale.id)
            raise HTTPException(status_code=500, detail=f"Could not generate PDF: {e}")

    write_log(
        db, user_id=current_user.id, admin_id=current_user.tenant_id, action="INVOICE_PDF_DOWNLOAD",
        resource="sales", status="SUCCESS", ip=_client_ip(request), meta={"sale_id": sale.id},
    )
    return FileResponse(
        path=str(pdf_path),
        media_type="application/pdf",
        filename=f"Invoice_{sale.invoice_number}.pdf",
    )


# =========================
# COUNTERS
# =========================
@router.get("/pos/counters/{kind}", response_model=sale_schemas.CounterOut)
def get_counter(
    kind: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    if kind not in INVOICE_PREFIXES:
        raise HTTPException(status_code=404, detail="Unknown counter")
    count = current_count(db, current_user.tenant_id, kind)
    return {"type": kind, "count": count, "next_invoice_number": format_invoice_number(kind, count + 1)}
