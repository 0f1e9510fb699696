"""Outbound integrations other than the document store."""

from cloudcode.infrastructure.external.content_hook import HttpContentHookClient
from cloudcode.infrastructure.external.email import LogOnlyEmailSender, MailgunEmailSender

__all__ = ["HttpContentHookClient", "LogOnlyEmailSender", "MailgunEmailSender"]
