"""Amazon Web Services providers."""

from .polly import AmazonPollyProvider

__all__ = ["AmazonPollyProvider"]
