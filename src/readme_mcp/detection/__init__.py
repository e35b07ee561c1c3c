"""Project metadata detection."""

from .detector import ProjectInfo, detect_project

__all__ = ["ProjectInfo", "detect_project"]
