import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from asset_depreciation.api.routes import assets, reports
from asset_depreciation.config.settings import get_settings
from asset_depreciation.models.database import get_engine, init_db

logger = logging.getLogger("asset_depreciation.api")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s API", settings.app_name)
    init_db(get_engine())
    yield
    logger.info("Shutting down %s API", settings.app_name)


app = FastAPI(
    title="asset-depreciation API",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    elapsed = time.time() - start
    logger.info(
        "%s %s %d %.3fs",
        request.method,
        request.url.path,
        response.status_code,
        elapsed,
    )
    return response


app.include_router(assets.router, prefix=settings.api_prefix)
app.include_router(reports.router, prefix=settings.api_prefix)


@app.get(f"{settings.api_prefix}/health")
def health():
    """Root-level health check."""
    return {"status": "ok", "service": settings.app_name}
