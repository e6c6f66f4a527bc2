# routers/refresh.py

import asyncio
import json
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError

from dependencies import get_notifier, get_refresher, get_site_config, require_refresh_slot
from errors import RefreshError, RequestFormatError
from models.site_config import SiteConfig
from models.webhook_payload import REF_PREFIX, WebhookPayload
from notifications import Notifications
from refresher import SiteRefresher

router = APIRouter()
logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def read_branch(request: Request) -> str:
    """
    Extract the pushed branch name from the webhook body.

    Raises:
        RequestFormatError: The body is unreadable, not a JSON push payload, or the
            ref is not a branch ref.
    """
    try:
        body_bytes = await request.body()
    except Exception as e:
        logger.error(f"Error reading request body: {e}")
        raise RequestFormatError("unreadable body", status.HTTP_500_INTERNAL_SERVER_ERROR) from e

    try:
        data = json.loads(body_bytes)
        # A bare null decodes to an empty payload, which then fails the ref check.
        payload = WebhookPayload.model_validate({} if data is None else data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raw = body_bytes.decode("utf-8", errors="replace")
        logger.error(f"Error unmarshaling request payload: {e}\nPayload:\n{raw}")
        raise RequestFormatError("malformed payload", status.HTTP_500_INTERNAL_SERVER_ERROR) from e

    branch = payload.branch()
    if branch is None:
        logger.warning(f"Unexpected ref format. Received {payload.ref}; expected prefix {REF_PREFIX}.")
        raise RequestFormatError("unexpected ref format", status.HTTP_400_BAD_REQUEST)
    return branch


def refresh_and_notify(refresher: SiteRefresher, notifier: Notifications, git_url: str, branch: str, target_dir: str):
    try:
        refresher.refresh(git_url, branch, target_dir)
    except RefreshError as e:
        notifier.notify_refresh_event(branch, target_dir, "failed", str(e))
        raise
    notifier.notify_refresh_event(branch, target_dir, "successful")


@router.api_route(
    "/refresh",
    methods=ALL_METHODS,
    summary="Site Refresh Webhook Endpoint",
    dependencies=[Depends(require_refresh_slot)]
)
async def handle_refresh(
        request: Request,
        site_config: SiteConfig = Depends(get_site_config),
        refresher: SiteRefresher = Depends(get_refresher),
        notifier: Notifications = Depends(get_notifier)
):
    if request.method != "POST":
        return Response(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, headers={"Allow": "POST"})

    # 1. The global rate limit is applied by require_refresh_slot; a refusal becomes a 500 in main.py.
    # 2. Parse payload and branch.
    try:
        branch = await read_branch(request)
    except RequestFormatError as e:
        return Response(status_code=e.status_code)

    # 3. Resolve the target directory.
    target_dir = site_config.target_dir_for(branch)
    if target_dir is None:
        logger.info(f"ignoring request for branch that does not match any config: {branch}")
        return Response(status_code=status.HTTP_200_OK)

    # 4. Refresh. The response waits for the refresh; the blocking work runs in an executor.
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(
            None,
            refresh_and_notify,
            refresher,
            notifier,
            site_config.git_url,
            branch,
            target_dir
        )
    except RefreshError as e:
        logger.error(f"Error refreshing site: {e}")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Refreshed site content in dir {target_dir} from branch {branch}")
    return Response(status_code=status.HTTP_200_OK)
