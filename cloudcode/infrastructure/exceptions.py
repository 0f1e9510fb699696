"""Infrastructure exceptions for outbound calls other than the document store.

They extend CloudCodeException so the webhook layer maps them to Parse
error responses consistently.
"""

from cloudcode.domain.exceptions import CloudCodeException


class ContentHookException(CloudCodeException):
    """A site's content hook URL did not answer with 200."""

    def __init__(self, url: str, status: int | None, reason: str | None = None) -> None:
        message = (
            f"Content hook responded with status {status}"
            if status is not None
            else f"Content hook request failed: {reason}"
        )
        super().__init__(
            message,
            "CONTENT_HOOK_FAILED",
            {"url": url, "status": status},
        )
        self.status = status


class EmailDeliveryException(CloudCodeException):
    """The mail provider refused or never received a send request."""

    def __init__(self, recipient: str, status: int | None, reason: str | None = None) -> None:
        message = (
            f"Email provider responded with status {status}"
            if status is not None
            else f"Email request failed: {reason}"
        )
        super().__init__(
            message,
            "EMAIL_DELIVERY_FAILED",
            {"recipient": recipient, "status": status},
        )
        self.status = status
