"""updown-webhook - FastAPI application receiving updown.io webhooks."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST

from updown_webhook.auth import RequestAuthenticator
from updown_webhook.config import get_settings
from updown_webhook.dispatcher import EventDispatcher
from updown_webhook.errors import AuthenticationError, BatchError, DecodeError
from updown_webhook.log import configure_logging
from updown_webhook.metrics import PrometheusMetrics
from updown_webhook.resolver import parse_ips, resolve_provider_ips
from updown_webhook.sources.updown import UpdownSource

logger = logging.getLogger(__name__)

# Populated by the lifespan handler
authenticator: RequestAuthenticator | None = None
dispatcher: EventDispatcher | None = None
metrics: PrometheusMetrics | None = None

source = UpdownSource()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    global authenticator, dispatcher, metrics

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    metrics = PrometheusMetrics()
    metrics.record_build_info(settings.subsystem, settings.build_time, settings.git_commit)

    # Without the whitelist no request can be authenticated, so failing here
    # aborts startup
    if settings.allowed_ips:
        provider_ips = parse_ips(settings.allowed_ips)
        logger.info(
            f"Using {len(provider_ips)} configured provider IP(s)",
            extra={"handler": "main"},
        )
    else:
        provider_ips = await resolve_provider_ips(settings.whitelist_host)

    authenticator = RequestAuthenticator(provider_ips, user_agent=settings.user_agent)
    dispatcher = EventDispatcher(settings.subsystem, metrics)

    logger.info("updown-webhook started", extra={"handler": "main"})

    yield

    authenticator = None
    dispatcher = None
    metrics = None
    logger.info("updown-webhook stopped", extra={"handler": "main"})


app = FastAPI(
    title="updown-webhook",
    description="Receives updown.io webhooks, validates and counts their events",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/metrics")
async def prometheus_metrics() -> Response:
    """Prometheus exposition of the webhook counters."""
    if not metrics:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(content=metrics.exposition(), media_type=CONTENT_TYPE_LATEST)


@app.api_route("/", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def webhook(request: Request) -> JSONResponse:
    """Receive an updown.io webhook batch."""
    handler = "webhook"
    logger.debug(
        "Debugging",
        extra={"handler": handler, "headers": dict(request.headers)},
    )

    if not authenticator or not dispatcher:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook handler not initialized",
        )

    try:
        authenticator.authenticate(request.method, request.headers)
    except AuthenticationError as e:
        logger.error(str(e), extra={"handler": handler})
        raise HTTPException(status_code=e.status_code, detail=str(e))

    body = await request.body()

    # Decode and batch failures stem from client data but are reported as
    # server errors, matching the status codes updown.io has always seen
    try:
        events = source.parse(body)
    except DecodeError as e:
        logger.error(str(e), extra={"handler": handler, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    try:
        dispatcher.process(events)
    except BatchError as e:
        logger.error(
            "unable to process events",
            extra={"handler": handler, "error": str(e)},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "message": str(e),
                "events": len(events),
                "invalid": e.invalid,
            },
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "ok", "events": len(events)},
    )


def run() -> None:
    """Run the application using uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "updown_webhook.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
