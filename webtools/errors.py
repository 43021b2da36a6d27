# webtools/errors.py


class WebToolsError(Exception):
    """Base class for all errors raised by the analyzer package."""


class InvalidInputError(WebToolsError, ValueError):
    """Raised when a URL or HTML payload violates the caller contract."""


class TransportError(WebToolsError):
    """
    Raised when every fetch attempt for a URL failed.

    `attempts` holds (endpoint, message) pairs in the order they were tried;
    the exception message is the last attempt's message.
    """

    def __init__(self, url: str, attempts=None):
        self.url = url
        self.attempts = list(attempts or [])
        last = self.attempts[-1][1] if self.attempts else "no fetch attempt was made"
        super().__init__(last)

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "error": str(self),
            "attempts": [{"endpoint": e, "message": m} for e, m in self.attempts],
        }
