import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import sentry_sdk
import uvicorn

from cv_analyzer import __version__
from cv_analyzer.api.v1.analyze import router as analyze_router
from cv_analyzer.api.v1.extract import router as extract_router
from cv_analyzer.api.v1.health import router as health_router
from cv_analyzer.core.config import settings
from cv_analyzer.core.cors import cors_allowed_origins
from cv_analyzer.core.errors import ApiError, api_error_handler, validation_error_handler
from cv_analyzer.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)

app = FastAPI(title="CV Analyzer API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(analyze_router, prefix="/api", tags=["Analysis"])
app.include_router(extract_router, prefix="/api", tags=["Extraction"])

if settings.serve_static and Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


def serve() -> None:
    logger.info("Server is running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
