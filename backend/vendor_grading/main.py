import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vendor_grading.config import get_settings
from vendor_grading.api.routes import admin, catalog, due_diligence, rankings, reviewer, vendors
from vendor_grading.core.errors import GradingError
from vendor_grading.db.session import engine

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables are created via Alembic
    yield
    await engine.dispose()


app = FastAPI(
    title="Vendor Grading",
    description="Vendor onboarding forms, reviewer ratings and A-D vendor grades",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
    log.info(
        "grading_error",
        extra={"code": exc.code, "path": request.url.path, "event": "grading_error", **exc.details},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.code, "detail": exc.message},
    )


app.include_router(catalog.router, prefix="/api")
app.include_router(vendors.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(rankings.router, prefix="/api")
app.include_router(reviewer.router, prefix="/api")
app.include_router(due_diligence.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}
