"""Clear - capture everything, focus on a few things a day."""

__version__ = "0.1.0"
