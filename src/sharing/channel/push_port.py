"""Push notification channel port: abstract interface for push dispatch."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    """Abstract interface for push notification sinks."""

    @abstractmethod
    def send(self, user_id: str, payload: dict, timeout: float | None = None) -> dict:
        """Hand a push notification for `user_id` to the provider.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
