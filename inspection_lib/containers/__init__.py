"""Containers weighed for a bill."""
from .models import Container, ContainerCondition, ContainerPayload, SealCondition
from .repository import ContainerRepository
from .query import ContainerQuery
from .service import ContainerService

__all__ = [
    "Container",
    "ContainerCondition",
    "ContainerPayload",
    "SealCondition",
    "ContainerRepository",
    "ContainerQuery",
    "ContainerService",
]
