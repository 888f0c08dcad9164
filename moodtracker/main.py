# moodtracker/main.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from moodtracker.core.config import Settings
from moodtracker.core.errors import DomainError
from moodtracker.core.timezone import format_time, utc_now
from moodtracker.db.session import build_engine, build_session_factory, get_db, init_db
from moodtracker.routers import auth, factors, journals, moods
from moodtracker.services.factors import seed_factors

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(
        title="Mood Tracker API",
        version=VERSION,
        description="Mood entries, contextual factors and journal notes per user",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )

    @app.middleware("http")
    async def catch_unexpected(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("❌ Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse({"success": False, "error": "Internal Server Error"}, status_code=500)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse({"success": False, "error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"success": False, "error": _first_validation_message(exc)}, status_code=400)

    @app.on_event("startup")
    def on_startup():
        init_db(engine)
        if settings.seed_factors:
            db = app.state.session_factory()
            try:
                seed_factors(db)
            finally:
                db.close()

    @app.on_event("shutdown")
    def on_shutdown():
        engine.dispose()

    app.include_router(auth.router, tags=["auth"])
    app.include_router(moods.router, tags=["moods"])
    app.include_router(journals.router, tags=["journals"])
    app.include_router(factors.router)

    @app.get("/")
    def root():
        return {
            "success": True,
            "message": "Mood Tracker is up and running!",
            "data": {"version": VERSION, "docs": "/docs", "time": format_time(utc_now())},
        }

    @app.get("/health")
    def health(db: Session = Depends(get_db)):
        try:
            db.execute(text("select 1"))
        except Exception as e:
            logger.warning("Database not ready: %s", e.__class__.__name__)
            return JSONResponse({"success": False, "error": "Database not ready"}, status_code=500)
        return {"success": True, "message": "Database connection successful", "data": {"version": VERSION}}

    return app


def main(settings: Optional[Settings] = None) -> None:
    import uvicorn

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
