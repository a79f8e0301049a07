"""Cutting tests: final samples per bill and container cuts."""
from .models import CuttingTest, CuttingTestPayload, CuttingTestType
from .repository import CuttingTestRepository
from .query import CuttingTestQuery
from .service import CuttingTestService

__all__ = [
    "CuttingTest",
    "CuttingTestPayload",
    "CuttingTestType",
    "CuttingTestRepository",
    "CuttingTestQuery",
    "CuttingTestService",
]
