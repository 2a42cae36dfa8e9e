"""Resolution cache APIs."""

from .store import ResolutionCache

__all__ = ["ResolutionCache"]
