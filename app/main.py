import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.deps import get_scheduler
from app.api.routes import cache, champions, health, race_winners, scheduler
from app.core.config import settings
from app.core.exceptions import ConfigurationError, UpstreamError
from app.core.middleware import SecurityMiddleware

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    refresher = get_scheduler() if settings.refresh_enabled else None
    if refresher:
        refresher.start()
    yield
    if refresher:
        refresher.stop()


app = FastAPI(title="F1 Champions API", version="1.0.0", lifespan=lifespan)

app.add_middleware(SecurityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)

# Routers
app.include_router(health.router, tags=["system"])
app.include_router(champions.router, prefix="/champions", tags=["champions"])
app.include_router(race_winners.router, prefix="/race-winners", tags=["race-winners"])
app.include_router(scheduler.router, prefix="/scheduler", tags=["scheduler"])
app.include_router(cache.router, prefix="/cache", tags=["cache"])


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error("Upstream failure on %s: %s", request.url.path, exc)
    detail = "Upstream data source unavailable" if settings.is_production else str(exc)
    return JSONResponse(status_code=502, content={"detail": detail})


@app.get("/", include_in_schema=False)
def root():
    return {"message": "F1 Champions API - see /docs"}
