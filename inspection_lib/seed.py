"""Deterministic demo data for local development."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict

from inspection_lib.bills import BillService
from inspection_lib.containers import ContainerService
from inspection_lib.cutting_tests import CuttingTestService, CuttingTestType
from inspection_lib.services import Registry

logger = logging.getLogger(__name__)

DEMO_BILL = {
    'bill_number': 'DEMO-0001',
    'seller': 'Tan Phu Cashew Co.',
    'buyer': 'Golden Kernel Trading',
    'origin': 'Ivory Coast',
    'net_on_bl': 60000,
    'quantity_of_bags_on_bl': 750,
    'inspection_location': 'Cat Lai Port',
    'inspection_start_date': datetime(2025, 9, 1, 8, 0),
    'inspection_end_date': datetime(2025, 9, 2, 17, 0),
}

DEMO_CONTAINERS = [
    {'truck': '51C-12345', 'container_number': 'MSCU1234567', 'quantity_of_bags': 375,
     'w_total': 48500, 'w_truck': 10000, 'w_container': 3800, 'w_gross': 48500, 'w_dunnage_dribag': 40},
    {'truck': '51C-67890', 'container_number': 'TGHU7654321', 'quantity_of_bags': 375,
     'w_total': 48320, 'w_truck': 9850, 'w_container': 3750, 'w_gross': 48320, 'w_dunnage_dribag': 40},
]


def seed_demo_data(registry: Registry) -> Dict[str, Any]:
    """Insert one bill with two containers, three final samples and one
    container cut per container. Does nothing when the demo bill exists."""
    bills: BillService = registry.resolve(BillService)
    containers: ContainerService = registry.resolve(ContainerService)
    tests: CuttingTestService = registry.resolve(CuttingTestService)

    existing = bills.get_all_bills({'search': DEMO_BILL['bill_number']}).items
    if existing:
        logger.info("Demo bill already present (id=%s)", existing[0].id)
        return {'created': False, 'bill_id': existing[0].id}

    bill = bills.create_bill(DEMO_BILL)
    created_containers = [containers.create_container({'bill_id': bill.id, **c}) for c in DEMO_CONTAINERS]

    for i, test_type in enumerate(CuttingTestType.final_sample_types()):
        tests.create_cutting_test({
            'bill_id': bill.id,
            'type': int(test_type),
            'moisture': 9.5 + i * 0.4,
            'nut_count': 198 + i,
            'w_reject_nut': 60,
            'w_defective_nut': 110,
            'w_defective_kernel': 50 + i * 2,
            'w_good_kernel': 230 - i * 3,
            'w_sample_after_cut': 990,
        })
    for i, container in enumerate(created_containers):
        tests.create_cutting_test({
            'bill_id': bill.id,
            'container_id': container.id,
            'type': int(CuttingTestType.CONTAINER_CUT),
            'moisture': 10.2 + i * 1.5,
            'nut_count': 200,
            'w_defective_kernel': 48,
            'w_good_kernel': 226,
        })

    logger.info("Seeded demo bill %s with %d containers", bill.id, len(created_containers))
    return {'created': True, 'bill_id': bill.id}
