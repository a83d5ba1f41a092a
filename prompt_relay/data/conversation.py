"""
Conversation records captured from relayed completion requests.
Each record is one prompt/response pair in ChatML message form.
"""
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_WORKFLOW_ID = "default"


@dataclass
class ChatMessage:
    """A single ChatML message"""
    role: str
    content: str

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict) -> 'ChatMessage':
        """Create ChatMessage from dictionary"""
        return cls(role=data.get("role", ""), content=data.get("content", ""))


@dataclass
class ConversationRecord:
    """
    One captured prompt/response pair.

    Attributes:
        messages: User prompt followed by the assistant reply
        timestamp: ISO-8601 capture time (UTC)
        endpoint: Upstream endpoint the request was relayed to
        model: Model named in the request, or "unknown"
        workflow_id: Workflow the request belongs to
    """
    messages: list[ChatMessage]
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    endpoint: str = "/v1/completions"
    model: str = "unknown"
    workflow_id: str = DEFAULT_WORKFLOW_ID

    @property
    def prompt(self) -> str:
        """Content of the first user message, or empty string"""
        for message in self.messages:
            if message.role == "user":
                return message.content
        return ""

    @property
    def captured_at(self) -> datetime:
        """Parsed capture timestamp"""
        timestamp = self.timestamp
        if timestamp.endswith("Z"):
            # JavaScript toISOString(); fromisoformat only accepts it from 3.11 on
            timestamp = timestamp[:-1] + "+00:00"
        return datetime.fromisoformat(timestamp)

    def to_dict(self) -> dict:
        """Convert to the JSONL line layout"""
        return {
            "messages": [message.to_dict() for message in self.messages],
            "timestamp": self.timestamp,
            "endpoint": self.endpoint,
            "model": self.model,
            "workflow_id": self.workflow_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ConversationRecord':
        """Create ConversationRecord from dictionary"""
        return cls(
            messages=[ChatMessage.from_dict(message) for message in data.get("messages", [])],
            timestamp=data["timestamp"],
            endpoint=data.get("endpoint", "/v1/completions"),
            model=data.get("model", "unknown"),
            workflow_id=data.get("workflow_id", DEFAULT_WORKFLOW_ID),
        )

    @classmethod
    def from_exchange(
        cls,
        request_body: dict,
        response_body: dict,
        endpoint: str,
        workflow_id: str | None = None,
    ) -> 'ConversationRecord':
        """
        Build a record from a relayed request and the upstream response.

        A ``workflow_id`` in the request body takes precedence over the one
        the relay was started with. Bodies without a plain prompt or a
        recognizable completion are stored as JSON text.
        """
        prompt = request_body.get("prompt") or json.dumps(request_body)
        if not isinstance(prompt, str):
            # batched prompts arrive as a list
            prompt = json.dumps(prompt)

        choices = response_body.get("choices") or [{}]
        first_choice = choices[0] if isinstance(choices[0], dict) else {}
        reply = (
            first_choice.get("text")
            or (first_choice.get("message") or {}).get("content")
            or json.dumps(response_body)
        )
        if not isinstance(reply, str):
            reply = json.dumps(reply)

        return cls(
            messages=[
                ChatMessage(role="user", content=prompt),
                ChatMessage(role="assistant", content=reply),
            ],
            endpoint=endpoint,
            model=request_body.get("model") or "unknown",
            workflow_id=request_body.get("workflow_id") or workflow_id or DEFAULT_WORKFLOW_ID,
        )
