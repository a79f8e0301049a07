from typing import Any, Dict

from inspection_lib.bills import BillService
from inspection_lib.containers import ContainerService
from inspection_lib.services import Registry


def make_bill(registry: Registry, **overrides: Any):
    """Create a bill through the service with sensible defaults."""
    data: Dict[str, Any] = {'bill_number': 'BL-001', 'seller': 'Seller', 'buyer': 'Buyer', 'origin': 'Ghana'}
    data.update(overrides)
    return registry.resolve(BillService).create_bill(data)


def make_container(registry: Registry, bill_id: int, **overrides: Any):
    data: Dict[str, Any] = {
        'bill_id': bill_id,
        'truck': '51C-00001',
        'container_number': 'ABCD1234567',
        'quantity_of_bags': 300,
        'w_total': 40000,
        'w_truck': 10000,
        'w_container': 3800,
        'w_gross': 26200,
        'w_dunnage_dribag': 50,
    }
    data.update(overrides)
    return registry.resolve(ContainerService).create_container(data)
