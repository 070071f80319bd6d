"""Exceptions shared by the core, the services and the CLI."""


class ValidationError(ValueError):
    """Raised when caller input is missing or malformed. Never retried."""

    pass


class NotFoundError(LookupError):
    """Raised when a task does not exist or belongs to another user."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class ExtractionError(RuntimeError):
    """Raised by task extractors; intake recovers with a fallback task."""

    pass
