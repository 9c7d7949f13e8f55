import logging
from typing import Optional

from fastapi import FastAPI, Depends, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app import crud, schemas
from backend.app.metrics import MetricsMiddleware, configure_logging
from shared.config import settings
from shared.database import engine as default_engine, get_db, init_db, make_session_factory

logger = logging.getLogger(__name__)


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Event Tracker API",
        description="Collects user interaction events posted by the tracking script",
        version="1.0.0",
    )
    app.state.engine = engine if engine is not None else default_engine
    app.state.session_factory = make_session_factory(app.state.engine)
    app.state.tracker_script_path = settings.SCRIPT_PATH

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept"],
    )

    @app.on_event("startup")
    def startup_event():
        init_db(app.state.engine)
        logger.info(f"Events table ready on {app.state.engine.url!r}")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": _format_validation_error(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.get("/generate-user-id", response_model=schemas.UserIdResponse)
    def generate_user_id():
        """Hand out a fresh random user id for a new visitor."""
        return schemas.UserIdResponse(userId=crud.generate_user_id())

    @app.post("/track", responses={400: {"model": schemas.ErrorResponse}, 500: {"model": schemas.ErrorResponse}})
    def track(data: schemas.TrackingData, db: Session = Depends(get_db)):
        """
        Record one event.

        The timestamp is stored as sent by the client; the server does not
        stamp its own receipt time. Returns 200 with an empty body.
        """
        crud.create_event(db, data)
        return Response(status_code=200)

    @app.get("/tracker.js")
    def tracker_js():
        """Serve the bundled client-side tracking script."""
        script = crud.load_tracker_script(app.state.tracker_script_path)
        return Response(content=script, media_type="application/javascript")

    @app.get("/events", response_model=schemas.EventsResponse)
    def get_events(
            limit: Optional[str] = Query(None, description="Page size, defaults to 100"),
            offset: Optional[str] = Query(None, description="Rows to skip, defaults to 0"),
            db: Session = Depends(get_db),
    ):
        """
        List events, most recent timestamp first.

        ``meta.total`` counts every stored event regardless of paging.
        """
        resolved_limit, resolved_offset = schemas.resolve_page(limit, offset)
        events, total = crud.list_events(db, resolved_limit, resolved_offset)
        return schemas.EventsResponse(
            events=[schemas.EventOut.model_validate(event) for event in events],
            meta=schemas.EventsMeta(total=total, limit=resolved_limit, offset=resolved_offset),
        )

    @app.get("/")
    def root():
        return {
            "message": "Event Tracker API",
            "version": "1.0.0",
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Server is running on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
