"""Fake email adapter: records emails in memory for test assertions."""

from uuid import uuid4

from sharing.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, user_id: str, payload: dict, timeout: float | None = None) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "user_id": user_id,
                "subject": payload.get("title", ""),
                "body": payload.get("body", ""),
                "payload": payload,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def sent_to(self, user_id) -> list[dict]:
        return [email for email in self.sent_emails if email["user_id"] == str(user_id)]

    def reset(self):
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
