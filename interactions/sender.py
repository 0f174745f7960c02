"""
Follow-up Sender

Delivers a deferred reply's final content out of band, addressed by interaction token.
No retries: by the time this runs the original request is already acknowledged.
"""

import logging

from .rest import RestClient, RestClientError
from .schemas import FollowupMessage

logger = logging.getLogger(__name__)


class FollowupDeliveryError(Exception):
    """Failed to deliver the follow-up message."""
    pass


class FollowupSender:
    """Posts follow-up messages to `webhooks/{application_id}/{token}`."""

    def __init__(self, rest: RestClient, application_id: str):
        self.rest = rest
        self.application_id = application_id

    async def send(self, interaction_token: str, content: str) -> None:
        """
        Send `content` as the follow-up for the interaction.

        Raises:
            FollowupDeliveryError: If the call fails
        """
        path = f"webhooks/{self.application_id}/{interaction_token}"
        payload = FollowupMessage(content=content).model_dump()

        try:
            await self.rest.post_json(path, payload)
        except RestClientError as e:
            raise FollowupDeliveryError(str(e)) from e

        logger.info(
            "Follow-up delivered",
            extra={"content_length": len(content)},
        )
