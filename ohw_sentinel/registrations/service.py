import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from ohw_sentinel.core.config import settings
from ohw_sentinel.db.session import init_db
from .api import router as registrations_router
from .rules import get_rule_set

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Fail at startup rather than on the first registration
    rule_set = get_rule_set()
    logger.info(f"Loaded {len(rule_set)} reminder rules")
    yield


def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.include_router(
        registrations_router,
        prefix=f"{settings.API_V1_STR}/registrations",
        tags=["registrations"],
    )
    if settings.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
    return app


app = create_app()
