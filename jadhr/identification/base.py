"""
Abstract base class for passage identifiers.

This module defines the interface that free-form (non-corpus) identifiers
must follow.
"""

from abc import ABC, abstractmethod
from typing import Optional

from jadhr.models import MatchResult


class BaseIdentifier(ABC):
    """
    Abstract interface for identifying a passage from a raw transcript.

    Example:
        class MyIdentifier(BaseIdentifier):
            async def identify(self, transcript: str) -> MatchResult | None:
                ...
    """

    @abstractmethod
    async def identify(self, transcript: str) -> Optional[MatchResult]:
        """
        Identify the passage a transcript was recited from.

        Args:
            transcript: Raw, unnormalized transcript

        Returns:
            MatchResult, or None if the response could not be understood

        Raises:
            RemoteServiceError: If the service call itself fails
        """
        pass

    async def aclose(self) -> None:
        """Release any held resources."""

    async def __aenter__(self) -> "BaseIdentifier":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
