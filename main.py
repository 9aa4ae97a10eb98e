import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

import exporters
from config import Settings
from document_converter import decode_html
from models import DocRequest, SheetRequest, SlidesRequest, UrlResponse
from slide_extractor import extract_slides
from slides_layout import DESCRIPTION_TOP, SLIDESHOW_DESCRIPTION_TOP, SlideTheme

MISSING_FIELDS = "Missing required fields."
MISSING_TOKEN_OR_HTML = "Missing 'access_token' or 'html_base64'"
NO_SLIDES = "No valid slides found in HTML."
BODY_TOO_LARGE = "Request body too large."


def configure_logging(level: str):
    logging.basicConfig(level=level.upper())


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


router = APIRouter()


# --- Endpoints ---

@router.get("/", response_class=PlainTextResponse)
def root():
    return "✅ Code running"


@router.post("/upload-doc", response_model=UrlResponse)
def upload_doc(payload: DocRequest, settings: Settings = Depends(get_settings)):
    """Converts the HTML to DOCX and imports it into Drive as a Google Doc."""
    if not payload.html_base64 or not payload.access_token or not payload.file_name:
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)

    try:
        html = decode_html(payload.html_base64)
        url = exporters.export_document(
            html, payload.access_token, payload.file_name,
            cleanup_on_failure=settings.cleanup_on_failure,
        )
    except Exception as e:
        logging.error(f"Upload error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {"url": url}


@router.post("/create-styled-sheet", response_model=UrlResponse)
def create_styled_sheet(payload: SheetRequest, settings: Settings = Depends(get_settings)):
    """Copies the first HTML table into a new styled spreadsheet."""
    if not payload.access_token or not payload.html_base64:
        raise HTTPException(status_code=400, detail=MISSING_TOKEN_OR_HTML)

    title = payload.title if payload.title is not None else exporters.DEFAULT_SHEET_TITLE
    try:
        html = decode_html(payload.html_base64)
        url = exporters.export_sheet(
            html, payload.access_token, title,
            cleanup_on_failure=settings.cleanup_on_failure,
        )
    except Exception as e:
        logging.error(f"Sheet creation error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {"url": url}


def _create_presentation(payload: SlidesRequest, settings: Settings, strategy: str,
                         description_top: float) -> dict:
    if not payload.access_token or not payload.html_base64:
        raise HTTPException(status_code=400, detail=MISSING_TOKEN_OR_HTML)

    try:
        html = decode_html(payload.html_base64)
        slides = extract_slides(html, strategy)
    except Exception as e:
        logging.error(f"Slides API Error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if not slides:
        raise HTTPException(status_code=400, detail=NO_SLIDES)

    theme = SlideTheme(
        background_image_url=settings.background_image_url,
        logo_image_url=settings.logo_image_url,
        footer_text=settings.footer_text,
    )
    try:
        url = exporters.export_presentation(
            slides, payload.access_token, exporters.presentation_title(payload.file_name),
            description_top=description_top,
            theme=theme,
            cleanup_on_failure=settings.cleanup_on_failure,
        )
    except Exception as e:
        logging.error(f"Slides API Error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {"url": url}


@router.post("/create-slides", response_model=UrlResponse)
def create_slides(payload: SlidesRequest, settings: Settings = Depends(get_settings)):
    """Builds a deck where every bold-only paragraph starts a new slide."""
    return _create_presentation(payload, settings, "bold-titles", DESCRIPTION_TOP)


@router.post("/create-slides-show", response_model=UrlResponse)
def create_slides_show(payload: SlidesRequest, settings: Settings = Depends(get_settings)):
    """Builds a deck with one slide per <h2> heading."""
    return _create_presentation(payload, settings, "headings", SLIDESHOW_DESCRIPTION_TOP)


# --- Error rendering ---

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def invalid_body_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


# --- Body size limit ---

class BodySizeLimitMiddleware:
    """
    Rejects bodies larger than `max_body_bytes` with 413. Bytes are counted
    as they arrive, so chunked requests without Content-Length are covered.
    The accepted body is replayed to the app as a single message.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length", "")
        if length.isdigit() and int(length) > self.max_body_bytes:
            await self._reject(scope, receive, send)
            return

        body = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body.extend(message.get("body", b""))
            if len(body) > self.max_body_bytes:
                await self._reject(scope, receive, send)
                return
            more_body = message.get("more_body", False)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": bytes(body), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send):
        response = JSONResponse(status_code=413, content={"error": BODY_TOO_LARGE})
        await response(scope, receive, send)


# --- App factory ---

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="HTML to Google Drive Service",
        description="Converts base64 HTML into Google Docs, Sheets and Slides using the caller's OAuth token.",
        version="1.0.0",
    )
    app.state.settings = settings

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    # Outermost, so 413 responses also carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, invalid_body_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    logging.info(f"🚀 Server running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
