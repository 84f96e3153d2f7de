"""Email channel port: abstract interface for email dispatch."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email sinks."""

    @abstractmethod
    def send(self, user_id: str, payload: dict, timeout: float | None = None) -> dict:
        """Hand an email for `user_id` to the provider.

        The provider resolves the user's address; the payload carries
        `title` (used as subject) and `body`.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
