# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import json
import os
from dotenv import load_dotenv

load_dotenv()

# Database URL from the environment, local SQLite file otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pos_backoffice.db")

# SQLAlchemy needs postgresql:// rather than the postgres:// some hosts hand out
if SQLALCHEMY_DATABASE_URL and SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

if "sqlite" in SQLALCHEMY_DATABASE_URL:
    connect_args = {"check_same_thread": False} # SQLite only
else:
    connect_args = {}

# JSON columns store non-ASCII text as-is; sales search runs ILIKE over them
def json_serializer(obj):
    return json.dumps(obj, ensure_ascii=False)

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args, json_serializer=json_serializer
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Register every model on Base.metadata before creating tables
    import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
