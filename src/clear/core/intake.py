"""Raw dump entries - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime

from clear.errors import ValidationError


@dataclass
class DumpEntry:
    """A block of free text captured before extraction."""

    id: str
    user_id: str
    content: str
    created_at: datetime
    processed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at.isoformat(),
            "processed": self.processed,
        }


def validate_content(content: str | None) -> str:
    """Reject empty dumps. Returns the content with outer whitespace removed."""
    content = (content or "").strip()
    if not content:
        raise ValidationError("Content is required")
    return content


def validate_task_text(text: str | None) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Task text is required")
    return text
