"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .focus_repo import FocusRepository
from .activity_repo import ActivityRepository
from .settings_repo import SettingsRepository
from .dump_repo import DumpRepository
from .user_repo import UserRepository
from .llm_service import LLMService
from .extractor import TaskExtractor
from .store import Store

__all__ = [
    "TaskRepository",
    "FocusRepository",
    "ActivityRepository",
    "SettingsRepository",
    "DumpRepository",
    "UserRepository",
    "LLMService",
    "TaskExtractor",
    "Store",
]
