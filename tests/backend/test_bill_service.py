from datetime import datetime

import pytest
from pydantic import ValidationError

from inspection_lib.bills import BillService
from inspection_lib.cutting_tests import CuttingTestService
from tests.helpers import make_bill, make_container


def _final_sample(registry, bill_id, test_type, good=230, defective=50):
    return registry.resolve(CuttingTestService).create_cutting_test({
        'bill_id': bill_id, 'type': test_type, 'moisture': 9.0,
        'w_defective_kernel': defective, 'w_good_kernel': good,
    })


def test_create_and_fetch_bill_with_relations(registry):
    svc = registry.resolve(BillService)
    bill = make_bill(registry, inspection_start_date=datetime(2025, 9, 1))
    container = make_container(registry, bill.id)
    _final_sample(registry, bill.id, 1)

    loaded = svc.get_bill_by_id(bill.id)
    assert loaded.bill_number == 'BL-001'
    assert loaded.inspection_start_date == datetime(2025, 9, 1)
    assert [c.id for c in loaded.containers] == [container.id]
    assert loaded.containers_count == 1
    assert loaded.final_samples_count == 1
    assert loaded.average_outturn == 44.97
    assert svc.get_bill_by_id(999) is None


def test_bill_number_must_be_unique(registry):
    make_bill(registry, bill_number='BL-1')
    with pytest.raises(ValueError, match='already taken'):
        make_bill(registry, bill_number='BL-1')


def test_payload_limits_raise_validation_error(registry):
    with pytest.raises(ValidationError):
        make_bill(registry, bill_number='X' * 21)


def test_update_merges_and_keeps_own_number(registry):
    svc = registry.resolve(BillService)
    bill = make_bill(registry, bill_number='BL-1', seller='Old')
    other = make_bill(registry, bill_number='BL-2')

    assert svc.update_bill(bill, {'seller': 'New'}) is True
    assert bill.seller == 'New'
    assert bill.bill_number == 'BL-1'
    assert svc.get_bill_by_id(bill.id).seller == 'New'

    with pytest.raises(ValueError):
        svc.update_bill(other, {'bill_number': 'BL-1'})


def test_delete_is_soft_and_does_not_cascade(registry):
    svc = registry.resolve(BillService)
    bill = make_bill(registry)
    container = make_container(registry, bill.id)

    assert svc.delete_bill(bill) is True
    assert svc.get_bill_by_id(bill.id) is None
    assert svc.get_all_bills().total == 0

    from inspection_lib.containers import ContainerService
    assert registry.resolve(ContainerService).get_container_by_id(container.id) is not None


def test_search_sort_and_paginate(registry):
    svc = registry.resolve(BillService)
    for i, seller in enumerate(['Alpha', 'Beta', 'Gamma']):
        make_bill(registry, bill_number=f'BL-{i}', seller=seller)

    page = svc.get_all_bills({'search': 'a', 'sort_by': 'seller', 'sort_direction': 'asc'}, per_page=2)
    assert [b.seller for b in page.items] == ['Alpha', 'Beta']
    assert page.total == 3
    assert page.has_more

    newest_first = svc.get_all_bills({})
    assert [b.bill_number for b in newest_first.items] == ['BL-2', 'BL-1', 'BL-0']

    # unknown sort fields are ignored rather than rejected
    assert svc.get_all_bills({'sort_by': 'password'}).total == 3


def test_pending_and_missing_final_samples(registry):
    svc = registry.resolve(BillService)
    complete = make_bill(registry, bill_number='DONE')
    make_container(registry, complete.id)
    for t in (1, 2, 3):
        _final_sample(registry, complete.id, t)

    partial = make_bill(registry, bill_number='PART')
    make_container(registry, partial.id, container_number='WXYZ7654321')
    _final_sample(registry, partial.id, 1)

    untouched = make_bill(registry, bill_number='NONE')

    assert [b.bill_number for b in svc.get_bills_pending_final_tests()] == ['NONE']
    assert [b.bill_number for b in svc.get_bills_missing_final_samples()] == ['PART']

    stats = svc.get_bill_statistics()
    assert stats['total_bills'] == 3
    assert stats['pending_final_tests_count'] == 1
    assert stats['missing_final_samples_count'] == 1
    assert len(stats['recent_bills']) == 3
    assert svc.calculate_average_outturn(untouched) is None
