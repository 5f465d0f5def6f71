"""
Identification module for the jadhr library.

Provides the identifier interface and the chat-completion fallback used
when local corpus matching finds no confident match.
"""

from jadhr.identification.base import BaseIdentifier
from jadhr.identification.remote import (
    ChatCompletionIdentifier,
    RemotePayload,
    build_request_body,
    extract_json_object,
    parse_identification,
)

__all__ = [
    "BaseIdentifier",
    "ChatCompletionIdentifier",
    "RemotePayload",
    "build_request_body",
    "extract_json_object",
    "parse_identification",
]
