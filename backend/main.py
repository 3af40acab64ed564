# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import init_db
from utils.errors import register_error_handlers
from utils.rate_limit import limiter

# Router imports
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.products import router as products_router
from routes.branches import router as branches_router
from routes.categories import router as categories_router
from routes.stock import router as stock_router
from routes.reports import router as reports_router
from routes.dashboard import router as dashboard_router
from routes.logs import router as logs_router

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield


app = FastAPI(title="Gudang SAJ API", version="1.0.0", lifespan=lifespan)
app.state.limiter = limiter
register_error_handlers(app)

# CORS: local dev frontends plus the deployed one from the environment
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(products_router)
app.include_router(branches_router)
app.include_router(categories_router)
app.include_router(stock_router)
app.include_router(reports_router)
app.include_router(dashboard_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Gudang SAJ API berjalan"}
