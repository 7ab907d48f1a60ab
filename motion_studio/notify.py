"""Best-effort webhook notification of finished jobs."""

import logging
from typing import TYPE_CHECKING, Any

import httpx

from .config import NotifyConfig

if TYPE_CHECKING:
    from .pipeline.jobs import RenderJob

logger = logging.getLogger(__name__)


class Notifier:
    """Receives each job once, right after it reaches a terminal state."""

    def notify(self, job: "RenderJob") -> bool:
        return False


class NullNotifier(Notifier):
    """Used when no webhook is configured."""

    pass


class WebhookNotifier(Notifier):
    """POSTs a small JSON summary of a finished job to a webhook."""

    def __init__(self, config: NotifyConfig, client: httpx.Client | None = None):
        if not config.webhook_url:
            raise ValueError("WebhookNotifier requires notify.webhook_url")
        self.config = config
        self._client = client

    def payload(self, job: "RenderJob") -> dict[str, Any]:
        data: dict[str, Any] = {"job_id": job.id, "status": job.status.value}
        if job.result is not None:
            if job.result.url:
                data["video_url"] = job.result.url
            if job.result.title:
                data["title"] = job.result.title
            if job.result.duration_seconds is not None:
                data["duration_seconds"] = job.result.duration_seconds
        if job.error:
            data["error"] = job.error
        return data

    def notify(self, job: "RenderJob") -> bool:
        """Send the notification. Never raises.

        Returns:
            True if the webhook answered with a 2xx status.
        """
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        try:
            if self._client is not None:
                response = self._client.post(self.config.webhook_url, json=self.payload(job), headers=headers)
            else:
                with httpx.Client(timeout=self.config.timeout_seconds) as client:
                    response = client.post(self.config.webhook_url, json=self.payload(job), headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("[notify] Webhook for %s failed: %s", job.id, e)
            return False

        if response.is_success:
            logger.info("[notify] Webhook for %s answered %d", job.id, response.status_code)
            return True
        logger.warning("[notify] Webhook for %s answered %d: %s", job.id, response.status_code, response.text[:200])
        return False


def get_notifier(config: NotifyConfig) -> Notifier:
    """Webhook notifier if a URL is configured, otherwise a no-op."""
    if config.webhook_url:
        return WebhookNotifier(config)
    return NullNotifier()
