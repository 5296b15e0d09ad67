from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
from app.configs.app_settings import settings
from app.configs.logging_config import setup_logging
from app.custom_error import ServerError
from app.routes.subscription_routes import subscription_router
from app.routes.stripe_webhook_route import stripe_webhook_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # before yield = code to run during startup
    setup_logging(settings.LOG_LEVEL)
    logger.info(f"✅ Serving static files from {settings.static_path}")

    yield
    # after yield = code to run during shutdown
    logger.info("✅ Server shutting down")


app = FastAPI(title="Subscriptions with card and direct debit", version="0.0.1", lifespan=lifespan)


def _error_body(message: str) -> dict:
    return {"error": {"message": message}}


# Every error leaving the API is shaped {"error": {"message": ...}}, which is what the browser client reads.
@app.exception_handler(RequestValidationError)
async def custom_request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed JSON and missing or empty fields"""
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", []) if part != "body"]
        field = ".".join(loc)
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))

    return JSONResponse(status_code=400, content=_error_body("; ".join(messages) or "Invalid request"))


@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle ProviderError and every other HTTPException"""
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def custom_unhandled_exception_handler(request: Request, exc: Exception):
    """Anything nobody caught"""
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
    error = ServerError()
    return JSONResponse(status_code=error.status_code, content=_error_body(error.detail))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(subscription_router)
app.include_router(stripe_webhook_router)


# registered last so the API routes above always win. "/" serves index.html, anything else is looked up under STATIC_DIR or answers 404
app.mount("/", StaticFiles(directory=settings.static_path, html=True), name="static")
