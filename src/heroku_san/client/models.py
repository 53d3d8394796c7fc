"""Pydantic models for Heroku API records."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import BaseModel


@dataclass
class APIResponse:
    """Result of a Heroku API call."""

    status: int
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)


class StackInfo(BaseModel):
    """One entry of an app's stack list."""

    name: str
    current: bool = False
    requested: bool = False
    beta: bool = False

    class Config:
        extra = "allow"


class AddonInfo(BaseModel):
    """An installed add-on."""

    name: str
    description: Optional[str] = None
    url: Optional[str] = None

    class Config:
        extra = "allow"


class AppInfo(BaseModel):
    """An application as returned by app creation."""

    name: str
    stack: Optional[str] = None
    web_url: Optional[str] = None
    git_url: Optional[str] = None

    class Config:
        extra = "allow"
