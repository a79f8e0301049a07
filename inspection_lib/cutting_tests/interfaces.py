"""Protocol definitions for the cutting test service."""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class CuttingTestServiceProtocol(Protocol):
    def search_cutting_tests(self, filters: Optional[Dict[str, Any]] = None) -> List[Any]: ...

    def get_cutting_test_by_id(self, test_id: int) -> Any: ...

    def get_cutting_tests_by_bill_id(self, bill_id: int) -> List[Any]: ...

    def create_cutting_test(self, data: Dict[str, Any]) -> Any: ...

    def update_cutting_test(self, cutting_test: Any, data: Dict[str, Any]) -> bool: ...

    def delete_cutting_test(self, cutting_test: Any) -> bool: ...

    def get_cutting_test_statistics(self) -> Dict[str, Any]:
        """High-moisture count and list plus the moisture distribution."""
        ...

    def calculate_defective_ratio(self, cutting_test: Any) -> Optional[Dict[str, Any]]: ...
