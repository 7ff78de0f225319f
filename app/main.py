import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api_routers.v1 import api_router
from app.features.auth.services.verification_codes import VerificationCodeStore
from app.features.auth.workers.code_sweeper import CodeSweeper
from app.features.health.routes.health import router as health_router
from app.platform.config import settings
from app.platform.db.session import engine, init_db
from app.platform.exceptions import add_exception_handlers
from app.platform.logger import LOG_FORMAT

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()

    # Reset codes live only as long as this process
    app.state.code_store = VerificationCodeStore(
        ttl=timedelta(minutes=settings.RESET_CODE_TTL_MINUTES),
        max_attempts=settings.RESET_CODE_MAX_ATTEMPTS,
    )
    app.state.code_sweeper = CodeSweeper(
        app.state.code_store, interval=settings.RESET_CODE_SWEEP_INTERVAL_SECONDS
    )
    app.state.code_sweeper.start()
    if settings.expose_reset_code:
        logger.warning("EXPOSE_RESET_CODE is enabled: reset codes are echoed in API responses")

    try:
        yield
    finally:
        await app.state.code_sweeper.stop()
        await engine.dispose()


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Accounts, login and password reset for the lab portal",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": f"{settings.APP_NAME} API",
        "description": "Laboratory management portal backend.",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": "/api/v1",
    }


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)

app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")
