"""FastAPI application entry point.

Run with:
    uvicorn trade_journal.main:app --host 0.0.0.0 --port 8000
or:
    python -m trade_journal.main
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trade_journal.config import settings
from trade_journal.database import create_db_and_tables
from trade_journal.utils.logging import setup_logging
from trade_journal.api import imports, trades, analytics, system


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Trade Journal",
    description="Broker CSV import and performance statistics for the trading journal",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(imports.router)
app.include_router(trades.router)
app.include_router(analytics.router)
app.include_router(system.router)


if __name__ == "__main__":
    uvicorn.run("trade_journal.main:app", host="0.0.0.0", port=8000)
