"""Protocol definitions for the container service."""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ContainerServiceProtocol(Protocol):
    def get_container_by_id(self, container_id: int) -> Any: ...

    def get_containers_by_bill_id(self, bill_id: int) -> List[Any]: ...

    def create_container(self, data: Dict[str, Any]) -> Any: ...

    def update_container(self, container: Any, data: Dict[str, Any]) -> bool: ...

    def delete_container(self, container: Any) -> bool: ...

    def get_container_statistics(self) -> Dict[str, Any]: ...

    def calculate_average_moisture(self, container: Any) -> Optional[float]: ...
