from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockdash.config import settings
from stockdash.dashboard.router import router as dashboard_router
from stockdash.database import close_database, init_database
from stockdash.exception_handlers import register_exception_handlers
from stockdash.insights.router import router as insights_router
from stockdash.logging_config import setup_logging
from stockdash.market.router import router as market_router
from stockdash.views.router import router as views_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="Stock Dashboard",
    description="Mock market data with AI-generated narrative analysis",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(market_router, prefix="/api/v1/market", tags=["market"])
app.include_router(insights_router, prefix="/api/v1/insights", tags=["insights"])
app.include_router(views_router, prefix="/api/v1/views", tags=["views"])
app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["dashboard"])


@app.get("/api/v1/health")
async def health():
    from stockdash.database import check_health

    await check_health()
    return {"status": "healthy"}
