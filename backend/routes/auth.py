# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from sqlalchemy import func
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user, role_required
from utils.audit import write_log
from models import users as models
from schemas import user as schemas
from database import get_db

router = APIRouter(tags=["Auth"])


def _client_ip(request: Request):
    return request.client.host if request and request.client else None


def _create_user(db: Session, payload: schemas.UserCreate, role: str, admin_id=None):
    # None when the email is taken
    normalized_email = payload.email.strip().lower()
    exists = db.query(models.User).filter(func.lower(models.User.email) == normalized_email).first()
    if exists:
        return None
    user = models.User(
        email=normalized_email, password_hash=get_password_hash(payload.password), role=role,
        first_name=payload.first_name, last_name=payload.last_name, admin_id=admin_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# Register a new tenant; the account becomes the tenant's ADMIN
@router.post("/register", response_model=schemas.UserResponse)
def register(user: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    new_user = _create_user(db, user, role="ADMIN")
    if new_user is None:
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=_client_ip(request), meta={"email": user.email, "reason": "Email exists"})
        raise HTTPException(status_code=400, detail="Email already registered")

    write_log(db, user_id=new_user.id, admin_id=new_user.tenant_id, action="REGISTER", resource="auth",
              status="SUCCESS", ip=_client_ip(request), meta={"email": new_user.email})
    return new_user


# Add a salesman to the caller's tenant (ADMIN only)
@router.post("/staff", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def create_staff(
    user: schemas.UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(role_required("ADMIN")),
):
    staff = _create_user(db, user, role="SALESMAN", admin_id=current_user.tenant_id)
    if staff is None:
        raise HTTPException(status_code=400, detail="Email already registered")

    write_log(db, user_id=current_user.id, admin_id=current_user.tenant_id, action="STAFF_CREATE",
              resource="auth", status="SUCCESS", ip=_client_ip(request), meta={"staff_id": staff.id})
    return staff


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = db.query(models.User).filter(models.User.email == payload.email.strip().lower()).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None),
                  admin_id=(db_user.tenant_id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=_client_ip(request), meta={"email": payload.email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": db_user.email, "role": db_user.role})

    write_log(db, user_id=db_user.id, admin_id=db_user.tenant_id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=_client_ip(request), meta={"email": db_user.email})

    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
