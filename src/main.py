"""Partner Desk API: deal pipeline and quote pricing for reseller partners.

Run locally with:
    python -m src.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.deals import router as deals_router
from src.api.errors import register_error_handlers
from src.api.quotes import router as quotes_router
from src.config import settings
from src.db.engine import db_lifespan
from src.pricing.tables import get_pallet_table, get_pricing_table

# ── Logging ──────────────────────────────────────────────────────────


def configure_logging(level: str) -> None:
    """Route stdlib logging to stdout and render structlog events on the console."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# ── App ──────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Partner Desk starting (env=%s)", settings.environment)

    # A malformed pricing override must stop startup, not the first quote
    table = get_pricing_table()
    pallet = get_pallet_table()
    logger.info(
        "Pricing loaded: %d terms, %d camera tiers, %d pallet terms",
        len(table.subscription_types), len(table.camera_tiers), len(pallet.subscription_types),
    )

    async with db_lifespan():
        yield

    logger.info("Partner Desk stopped")


app = FastAPI(
    title="Partner Desk API",
    description="Deal pipeline and quote pricing for reseller partners",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(deals_router)
app.include_router(quotes_router)
register_error_handlers(app)


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {
        "status": "ok",
        "environment": settings.environment,
        "base_currency": settings.pricing.base_currency,
    }


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
