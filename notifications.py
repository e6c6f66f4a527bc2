import requests
import logging

from models.site_config import NotificationSettings

logger = logging.getLogger(__name__)

SLACK_TIMEOUT = 10  # seconds


class Notifications:
    def __init__(self, settings: NotificationSettings = None):
        settings = settings or NotificationSettings()
        self.slack_webhook_url = settings.slack_webhook_url

    def send_slack_message(self, message: str):
        """
        Send a message to Slack via a webhook URL.
        """
        if not self.slack_webhook_url:
            logger.debug("Slack webhook URL not configured. Skipping Slack notification.")
            return
        payload = {"text": message}
        try:
            response = requests.post(self.slack_webhook_url, json=payload, timeout=SLACK_TIMEOUT)
            if response.status_code != 200:
                logger.error(f"Failed to send Slack message. Code: {response.status_code}, Resp: {response.text}")
            else:
                logger.info("Slack message sent successfully.")
        except requests.RequestException as e:
            logger.error(f"Exception while sending Slack message: {e}")

    def notify_refresh_event(self, branch: str, target_dir: str, status: str, details: str = ""):
        """
        Report the outcome of a site refresh.

        Args:
            branch: Branch that was pushed.
            target_dir: Directory the site is published into.
            status: "successful" or "failed".
            details: Optional extra context, e.g. the error message.
        """
        emoji = ":white_check_mark:" if status == "successful" else ":x:"
        message = f"{emoji} Site refresh {status} for branch `{branch}` into `{target_dir}`."
        if details:
            message += f"\n{details}"
        self.send_slack_message(message)
