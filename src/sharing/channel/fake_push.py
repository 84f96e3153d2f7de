"""Fake push adapter: records pushes in memory for test assertions."""

from uuid import uuid4

from sharing.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
        self.raise_error = False

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push delivery failed", raise_error=False):
        """Make subsequent sends fail, either by status or by raising."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error

    def send(self, user_id: str, payload: dict, timeout: float | None = None) -> dict:
        if self.raise_error:
            raise TimeoutError(self.failure_reason)
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append({"message_id": message_id, "user_id": user_id, "payload": payload})
        return {"message_id": message_id, "status": "sent"}

    def sent_to(self, user_id) -> list[dict]:
        return [push for push in self.sent_pushes if push["user_id"] == str(user_id)]

    def reset(self):
        self.sent_pushes.clear()
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
        self.raise_error = False
