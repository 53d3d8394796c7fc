"""Heroku platform API access."""

from .models import AddonInfo, APIResponse, AppInfo, StackInfo
from .platform import HerokuAPI, translate_errors

__all__ = [
    "AddonInfo",
    "APIResponse",
    "AppInfo",
    "HerokuAPI",
    "StackInfo",
    "translate_errors",
]
