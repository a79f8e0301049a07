"""Protocol definitions for the bill service."""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class BillServiceProtocol(Protocol):
    def get_all_bills(self, filters: Optional[Dict[str, Any]] = None, per_page: Optional[int] = None,
                      page: int = 1) -> Any: ...

    def get_bill_by_id(self, bill_id: int) -> Any: ...

    def create_bill(self, data: Dict[str, Any]) -> Any: ...

    def update_bill(self, bill: Any, data: Dict[str, Any]) -> bool: ...

    def delete_bill(self, bill: Any) -> bool: ...

    def get_bill_statistics(self) -> Dict[str, Any]:
        """Counts plus the recent, pending and incomplete bill lists."""
        ...

    def calculate_average_outturn(self, bill: Any) -> Optional[float]: ...

    def get_recent_bills(self, limit: int = 10) -> List[Any]: ...
