# campus_market/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from campus_market.config import Settings, get_settings
from campus_market.core.errors import MarketError
from campus_market.core.security import AccessGuard
from campus_market.database import FileBackedDB
from campus_market.repositories.products import ProductRepository
from campus_market.repositories.sections import SectionRepository
from campus_market.services.media_store import MediaStore, build_media_store
from campus_market.services.product_workflow import ProductMutationWorkflow
from campus_market.api.routes import sections as section_routes
from campus_market.api.routes import products as product_routes
from campus_market.middleware.cors_config import configure_cors
from campus_market.middleware.request_limits import add_security_headers, add_upload_limit


logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Campus Market API starting (env=%s, data=%s, media=%s)",
                settings.ENV, settings.DATA_DIR, settings.MEDIA_BACKEND)
    if settings.ADMIN_PASSWORD == Settings.model_fields["ADMIN_PASSWORD"].default:
        logger.warning("ADMIN_PASSWORD is the built-in default; set it in .env before deploying.")
    yield
    logger.info("Shutting down Campus Market API")


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MarketError)
    async def market_error_handler(request: Request, exc: MarketError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = first.get("msg", "Invalid request")
        return JSONResponse(status_code=400, content={"error": f"{loc}: {msg}" if loc else msg})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


def create_app(settings: Optional[Settings] = None, media_store: Optional[MediaStore] = None,
               db: Optional[FileBackedDB] = None) -> FastAPI:
    """
    Build the app. Configuration is read once here and handed to the guard,
    the media store and the database; nothing looks it up at request time.
    """
    settings = settings or get_settings()
    app = FastAPI(title="Campus Market API", version="0.1.0", lifespan=lifespan)

    db = db or FileBackedDB.from_settings(settings)
    sections = SectionRepository(db)
    products = ProductRepository(db, sections)
    guard = AccessGuard(settings.ADMIN_PASSWORD)
    media_store = media_store or build_media_store(settings)

    app.state.settings = settings
    app.state.guard = guard
    app.state.sections = sections
    app.state.products = products
    app.state.media_store = media_store
    app.state.workflow = ProductMutationWorkflow(guard, media_store, products, settings.MAX_UPLOAD_BYTES)

    configure_cors(app, settings)
    add_security_headers(app)
    add_upload_limit(app, settings.MAX_UPLOAD_BYTES)
    _install_error_handlers(app)

    # files stored by the local media backend
    if settings.MEDIA_BACKEND.strip().lower() == "local":
        Path(settings.MEDIA_DIR).mkdir(parents=True, exist_ok=True)
        app.mount("/media", StaticFiles(directory=settings.MEDIA_DIR), name="media")

    app.include_router(section_routes.router)
    app.include_router(product_routes.router)

    @app.get("/", tags=["root"])
    async def root():
        return {"status": "ok", "service": "Campus Market API"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("campus_market.main:app", host="0.0.0.0", port=get_settings().PORT)
