# main.py

import argparse
import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, Response, status

from config import BIND_HOST, DEBUG_MODE, LOG_DB_PATH, RATE_LIMIT_INTERVAL, load_config
from errors import ConfigError, RateLimitRejection
from logging_config import setup_logging
from models.site_config import SiteConfig
from notifications import Notifications
from rate_limit import RateLimiter
from refresher import SiteRefresher

# Routers
from routers.refresh import router as refresh_router

logger = logging.getLogger(__name__)


async def rate_limit_rejected(request: Request, exc: RateLimitRejection) -> Response:
    # Reported as a server-side condition, not a client error; no body.
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(
        site_config: SiteConfig,
        rate_limiter: RateLimiter = None,
        refresher: SiteRefresher = None,
        notifier: Notifications = None
) -> FastAPI:
    app = FastAPI(
        title="SiteHook",
        description="Webhook-triggered static site deployment",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )

    app.state.site_config = site_config
    app.state.rate_limiter = rate_limiter or RateLimiter(interval=RATE_LIMIT_INTERVAL)
    app.state.refresher = refresher or SiteRefresher()
    app.state.notifier = notifier or Notifications(site_config.notifications)

    app.add_exception_handler(RateLimitRejection, rate_limit_rejected)
    app.include_router(refresh_router)
    return app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="sitehook",
        description="Refresh a static site directory from git when a branch is pushed."
    )
    parser.add_argument("config", help="path to the JSON configuration file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Initialize logging once
    setup_logging(DEBUG_MODE, LOG_DB_PATH)

    try:
        site_config = load_config(args.config)
    except ConfigError as e:
        logger.critical(f"invalid config file '{args.config}': {e}")
        sys.exit(1)

    app = create_app(site_config)

    branch_summary = ", ".join(f"{bc.branch} -> {bc.target_dir}" for bc in site_config.branch_configs)
    logger.info(
        f"Starting server listening on {site_config.port} and git repo {site_config.git_url} "
        f"with branch configs [{branch_summary}]"
    )
    uvicorn.run(app, host=BIND_HOST, port=int(site_config.port), log_config=None)


if __name__ == "__main__":
    main()
