"""Combined storage interface."""

from typing import Protocol

from .activity_repo import ActivityRepository
from .dump_repo import DumpRepository
from .focus_repo import FocusRepository
from .settings_repo import SettingsRepository
from .task_repo import TaskRepository
from .user_repo import UserRepository


class Store(
    TaskRepository,
    FocusRepository,
    ActivityRepository,
    SettingsRepository,
    DumpRepository,
    UserRepository,
    Protocol,
):
    """Everything the services need from storage."""

    ...
