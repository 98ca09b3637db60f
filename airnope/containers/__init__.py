# airnope/containers/__init__.py
from airnope.containers.container import Container

__all__ = ["Container"]
