from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from drayboard.config import settings
from drayboard.middleware.exceptions import register_exception_handlers
from drayboard.routers import board, bulk_import, containers, health, yards
from drayboard.utils.cache import close_redis


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_redis()


app = FastAPI(
    title="DrayBoard",
    description="Container dispatch tracker: terminal, customers and yards",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
# Import routes first so /import is never read as a container id
app.include_router(bulk_import.router, prefix="/api/containers", tags=["import"])
app.include_router(containers.router, prefix="/api/containers", tags=["containers"])
app.include_router(yards.router, prefix="/api/yards", tags=["yards"])
app.include_router(board.router, prefix="/api/board", tags=["board"])
