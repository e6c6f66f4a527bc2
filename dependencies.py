# dependencies.py

import logging
from fastapi import Depends, Request

from errors import RateLimitRejection
from models.site_config import SiteConfig
from notifications import Notifications
from rate_limit import RateLimiter
from refresher import SiteRefresher

logger = logging.getLogger(__name__)

# The application factory stores one shared instance of each on app.state.


def get_site_config(request: Request) -> SiteConfig:
    return request.app.state.site_config


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_refresher(request: Request) -> SiteRefresher:
    return request.app.state.refresher


def get_notifier(request: Request) -> Notifications:
    return request.app.state.notifier


def require_refresh_slot(request: Request, rate_limiter: RateLimiter = Depends(get_rate_limiter)):
    # Non-POST requests are answered with 405 by the route and must not consume the window.
    if request.method != "POST":
        return
    if not rate_limiter.can_run():
        raise RateLimitRejection("refresh attempted inside the rate-limit interval")
