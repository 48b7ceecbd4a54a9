# ruff: noqa: F403, F401
"""Schemas package initialization."""

# Import all schemas to ensure they're registered
from .base import *
from .board import *
from .comment import *
from .focus import *
from .folder import *
from .project import *
