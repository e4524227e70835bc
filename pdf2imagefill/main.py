"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdf2imagefill import __version__
from pdf2imagefill.api.errors import register_exception_handlers
from pdf2imagefill.api.router import router
from pdf2imagefill.config import get_settings
from pdf2imagefill.utils.logging import get_logger

logger = get_logger(__name__)

ENDPOINTS = {
    "POST /pdf-to-images": "Convert PDF to images",
    "POST /images-to-pdf": "Draw on images and create PDF",
    "GET /health": "Health check",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    settings = get_settings()
    settings.temp_dir.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Starting PDF2ImageFill API",
        version=__version__,
        environment=settings.environment.value,
        render_scale=settings.render_scale,
        temp_dir=settings.temp_dir,
    )
    for route, summary in ENDPOINTS.items():
        logger.info(f"  {route} - {summary}")

    yield

    # Shutdown
    logger.info("Shutting down PDF2ImageFill API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="PDF2ImageFill API",
        description="""
        Convert PDFs to page images and back, stamping text and checkboxes
        at pixel coordinates on the way.

        ## Usage

        1. `POST /pdf-to-images` with a PDF to get one PNG per page
        2. Pick pixel coordinates on those images
        3. `POST /images-to-pdf` with the images and annotations to get the
           filled PDF
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if not settings.is_production else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject bodies whose declared length exceeds MAX_BODY_SIZE_MB."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > get_settings().max_body_size_bytes:
                logger.warning("Rejected oversized request", content_length=content_length)
                return JSONResponse(status_code=413, content={"error": "Request body too large"})
        return await call_next(request)

    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Describe the service."""
        return {
            "message": "PDF2ImageFill API",
            "version": __version__,
            "endpoints": ENDPOINTS,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# Create app instance
app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
