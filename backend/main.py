# backend/main.py
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from config import settings
from database import init_db

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Routers
from routes.auth import router as auth_router
from routes.logs import router as logs_router
from routes.products import router as products_router
from routes.customers import router as customers_router
from routes.cart import router as cart_router
from routes.sales import router as sales_router
from routes.purchases import router as purchases_router
from routes.adjustments import router as adjustments_router

# Initialisation
init_db()

app = FastAPI(title="POS Back Office API", version="1.0.0")

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(logs_router)
app.include_router(products_router)
app.include_router(customers_router)
app.include_router(cart_router)
app.include_router(sales_router)
app.include_router(purchases_router)
app.include_router(adjustments_router)

@app.get("/")
def read_root():
    return {"message": "POS Back Office API running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
