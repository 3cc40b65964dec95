"""Web application: JSON API, HTML dashboard and metrics."""
import logging
from typing import Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import AliasChoices, BaseModel, Field

from wordboard.config import TEMPLATES_DIR, Settings, settings as default_settings
from wordboard.errors import UpstreamError, WordboardError
from wordboard.monitoring import error_count, metrics_app, request_duration
from wordboard.services.review_service import ReviewService
from wordboard.services.view_model import (
    ASC,
    CARD_BREAKPOINT,
    DESC,
    SORT_FIELDS,
    ViewState,
    WordListViewModel,
)
from wordboard.services.word_service import ClientFactory, WordService

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store"}
FETCH_FAILED = "Failed to fetch words from Notion"
UPDATE_FAILED = "Failed to update review"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
router = APIRouter()


class ReviewRequest(BaseModel):
    """Body of POST /update-review."""
    identifier: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("identifier", "wordId"),
    )
    name: Optional[str] = None


def error_response(
    error: WordboardError,
    upstream_message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Envelope for a failed request. Upstream details stay in the logs."""
    error_count.labels(error_type=type(error).__name__).inc()
    message = upstream_message if isinstance(error, UpstreamError) else error.public_message
    return JSONResponse(
        {"success": False, "error": message},
        status_code=error.status_code,
        headers=headers,
    )


@router.get("/words")
async def list_words(request: Request) -> JSONResponse:
    """Every word in the database, normalized. Never cached."""
    service: WordService = request.app.state.word_service
    with request_duration.labels(handler="words").time():
        try:
            words = await service.list_words()
        except WordboardError as e:
            logger.error("Error fetching words: %s", e)
            return error_response(e, FETCH_FAILED, headers=NO_STORE)
        except Exception:
            logger.exception("Unexpected error fetching words")
            return error_response(WordboardError(), FETCH_FAILED, headers=NO_STORE)

    return JSONResponse(
        {"success": True, "words": [word.to_dict() for word in words]},
        headers=NO_STORE,
    )


@router.post("/update-review")
async def update_review(request: Request, body: ReviewRequest) -> JSONResponse:
    """Increment a word's review count and set its last review time."""
    service: ReviewService = request.app.state.review_service
    with request_duration.labels(handler="update_review").time():
        try:
            result = await service.mark_reviewed(identifier=body.identifier, name=body.name)
        except WordboardError as e:
            logger.error(
                "Error updating review (identifier=%r, name=%r): %s",
                body.identifier,
                body.name,
                e,
            )
            return error_response(e, UPDATE_FAILED)
        except Exception:
            logger.exception("Unexpected error updating review (identifier=%r, name=%r)", body.identifier, body.name)
            return error_response(WordboardError(), UPDATE_FAILED)

    return JSONResponse({"success": True, **result.to_dict()})


def _query(state: ViewState) -> str:
    params = {
        "search": state.search,
        "type": state.type_filter,
        "relevance": state.relevance_filter,
        "sort": state.sort_field or "",
        "dir": state.sort_dir,
    }
    return "?" + urlencode({key: value for key, value in params.items() if value})


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    search: str = "",
    type_filter: str = Query("", alias="type"),
    relevance: str = "",
    sort: str = "",
    direction: str = Query(ASC, alias="dir"),
) -> HTMLResponse:
    """Server-rendered dashboard over the view model."""
    state = ViewState(
        search=search,
        type_filter=type_filter,
        relevance_filter=relevance,
        sort_field=sort if sort in SORT_FIELDS else None,
        sort_dir=DESC if direction == DESC else ASC,
    )
    service: WordService = request.app.state.word_service
    error = None
    status_code = 200
    try:
        words = await service.list_words()
    except WordboardError as e:
        logger.error("Error rendering dashboard: %s", e)
        error_count.labels(error_type=type(e).__name__).inc()
        error = FETCH_FAILED if isinstance(e, UpstreamError) else e.public_message
        status_code = e.status_code
        words = []
    except Exception:
        logger.exception("Unexpected error rendering dashboard")
        error_count.labels(error_type="UnexpectedError").inc()
        error = FETCH_FAILED
        status_code = WordboardError.status_code
        words = []

    view = WordListViewModel(words, state)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "view": view,
            "state": state,
            "words": view.visible(),
            "stats": view.stats(),
            "sort_links": {field: _query(state.toggle_sort(field)) for field in SORT_FIELDS},
            "error": error,
            "card_breakpoint": CARD_BREAKPOINT,
        },
        status_code=status_code,
        headers=NO_STORE,
    )


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    error_count.labels(error_type="ValidationError").inc()
    return JSONResponse({"success": False, "error": "Invalid request body"}, status_code=400)


def create_app(
    settings: Optional[Settings] = None,
    client_factory: Optional[ClientFactory] = None,
) -> FastAPI:
    """Build the application around the given settings and Notion client factory."""
    settings = settings or default_settings

    app = FastAPI(
        title="Words Dashboard",
        description="Browse, search and review a vocabulary list kept in Notion",
    )
    app.state.settings = settings
    app.state.word_service = WordService(settings, client_factory)
    app.state.review_service = ReviewService(settings, client_factory)

    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.include_router(router)
    if settings.server.metrics_enabled:
        app.mount("/metrics", metrics_app())

    return app


app = create_app()
