"""Central re-exports for package-local Protocols.

The canonical definitions live beside their implementations in each
package; they are collected here for discoverability.
"""

from inspection_lib.storage.interfaces import StorageProtocol
from inspection_lib.bills.interfaces import BillServiceProtocol
from inspection_lib.containers.interfaces import ContainerServiceProtocol
from inspection_lib.cutting_tests.interfaces import CuttingTestServiceProtocol

__all__ = [
    "StorageProtocol",
    "BillServiceProtocol",
    "ContainerServiceProtocol",
    "CuttingTestServiceProtocol",
]
