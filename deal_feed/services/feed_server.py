"""
HTTP server exposing the deal feed.

``GET /deals`` runs the feed pipeline and returns the deal list as JSON;
an upstream failure is answered with 502. ``GET /health`` reports uptime
and recorded errors.
"""

import asyncio
import json
from datetime import datetime

from aiohttp import web

from ..components.feed_client import FetchError
from ..interfaces import IFeedPipeline
from ..utils.error_handling import ErrorCategory, ErrorSeverity, get_error_tracker
from ..utils.logging import get_logger

PIPELINE_KEY = web.AppKey("pipeline", object)
STARTED_AT_KEY = web.AppKey("started_at", datetime)

logger = get_logger("feed.server")


async def handle_deals(request: web.Request) -> web.Response:
    """Serve the current deal list, newest first."""
    pipeline: IFeedPipeline = request.app[PIPELINE_KEY]

    # The upstream fetch is blocking, keep it off the event loop
    loop = asyncio.get_running_loop()
    try:
        deals = await loop.run_in_executor(None, pipeline.build_feed)
    except FetchError as e:
        get_error_tracker().record_error(
            component="feed.server",
            category=ErrorCategory.EXTERNAL_SERVICE,
            severity=ErrorSeverity.HIGH,
            message=str(e),
            exception=e,
            context={"status": e.status},
        )
        return web.Response(status=502, text=str(e))

    body = json.dumps([deal.to_dict() for deal in deals], ensure_ascii=False)
    logger.debug("Served deal feed", extra={"deals": len(deals)})

    return web.Response(text=body, content_type="application/json")


async def handle_health(request: web.Request) -> web.Response:
    """Report uptime and error statistics."""
    started_at = request.app[STARTED_AT_KEY]
    uptime = (datetime.now() - started_at).total_seconds()

    return web.json_response(
        {
            "status": "ok",
            "started_at": started_at.isoformat(),
            "uptime_seconds": round(uptime, 1),
            "errors": get_error_tracker().get_error_stats(),
        }
    )


def create_app(pipeline: IFeedPipeline) -> web.Application:
    """
    Build the aiohttp application.

    Args:
        pipeline: Feed pipeline used to answer ``/deals``

    Returns:
        Configured web.Application
    """
    app = web.Application()
    app[PIPELINE_KEY] = pipeline
    app[STARTED_AT_KEY] = datetime.now()

    app.router.add_get("/deals", handle_deals)
    app.router.add_get("/health", handle_health)

    return app


def run_server(
    pipeline: IFeedPipeline, host: str = "127.0.0.1", port: int = 8080
) -> None:
    """Run the feed server until interrupted."""
    logger.info("Starting deal feed server", extra={"host": host, "port": port})
    web.run_app(create_app(pipeline), host=host, port=port, print=None)
