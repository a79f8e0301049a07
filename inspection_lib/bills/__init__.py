"""Bills of lading: records, persistence, queries and use cases."""
from .models import Bill, BillPayload
from .repository import BillRepository
from .query import BillQuery
from .service import BillService

__all__ = ["Bill", "BillPayload", "BillRepository", "BillQuery", "BillService"]
