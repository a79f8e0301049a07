import pytest
from pydantic import ValidationError

from inspection_lib.cutting_tests import CuttingTestService, CuttingTestType
from inspection_lib.cutting_tests.service import calculate_outturn_rate
from tests.helpers import make_bill, make_container


def test_outturn_rate_formula():
    assert calculate_outturn_rate({'w_defective_kernel': 50, 'w_good_kernel': 230})['outturn_rate'] == 44.97
    assert calculate_outturn_rate({'w_defective_kernel': 80, 'w_good_kernel': 700})['outturn_rate'] == 130.51
    assert 'outturn_rate' not in calculate_outturn_rate({'w_defective_kernel': 0, 'w_good_kernel': 230})


def test_type_and_container_pairing(registry):
    svc = registry.resolve(CuttingTestService)
    bill = make_bill(registry)
    container = make_container(registry, bill.id)

    with pytest.raises(ValueError, match='Final sample tests cannot be associated with a container'):
        svc.create_cutting_test({'bill_id': bill.id, 'type': 1, 'container_id': container.id})
    with pytest.raises(ValueError, match='Container tests must be associated with a container'):
        svc.create_cutting_test({'bill_id': bill.id, 'type': 4})

    other = make_bill(registry, bill_number='BL-OTHER')
    with pytest.raises(ValueError, match='does not belong'):
        svc.create_cutting_test({'bill_id': other.id, 'type': 4, 'container_id': container.id})
    with pytest.raises(ValueError, match='does not exist'):
        svc.create_cutting_test({'bill_id': bill.id, 'type': 4, 'container_id': 999})
    with pytest.raises(ValidationError):
        svc.create_cutting_test({'bill_id': bill.id, 'type': 7})
    with pytest.raises(ValidationError):
        svc.create_cutting_test({'bill_id': bill.id, 'type': 1, 'moisture': 101})


def test_create_update_and_delete(registry):
    svc = registry.resolve(CuttingTestService)
    bill = make_bill(registry)
    test = svc.create_cutting_test({
        'bill_id': bill.id, 'type': 1, 'moisture': 9.4,
        'w_defective_nut': 110, 'w_defective_kernel': 50, 'w_good_kernel': 230,
    })
    assert test.outturn_rate == 44.97
    assert test.sample_weight == 1000
    assert test.is_final_sample and not test.is_container_test
    assert test.test_type is CuttingTestType.FINAL_SAMPLE_FIRST_CUT

    assert svc.update_cutting_test(test, {'w_good_kernel': 240}) is True
    assert test.outturn_rate == round((25 + 240) * 80 / 453.6, 2)
    assert test.moisture == 9.4

    loaded = svc.get_cutting_test_by_id(test.id)
    assert loaded.bill.id == bill.id
    assert loaded.container is None

    assert svc.delete_cutting_test(test) is True
    assert svc.get_cutting_test_by_id(test.id) is None


def test_defective_ratio(registry):
    svc = registry.resolve(CuttingTestService)
    bill = make_bill(registry)
    test = svc.create_cutting_test({'bill_id': bill.id, 'type': 2, 'w_defective_nut': 110, 'w_defective_kernel': 50})
    ratio = svc.calculate_defective_ratio(test)
    assert ratio == {'defective_nut': 110, 'defective_kernel': 50, 'ratio': 0.5, 'formatted': '110/0.5'}

    bare = svc.create_cutting_test({'bill_id': bill.id, 'type': 3})
    assert svc.calculate_defective_ratio(bare) is None


def test_listing_and_moisture_distribution(registry):
    svc = registry.resolve(CuttingTestService)
    bill = make_bill(registry)
    container = make_container(registry, bill.id)
    for test_type, moisture in ((3, 7.5), (1, 9.0), (2, 10.5)):
        svc.create_cutting_test({'bill_id': bill.id, 'type': test_type, 'moisture': moisture})
    first = svc.create_cutting_test({'bill_id': bill.id, 'type': 4, 'container_id': container.id, 'moisture': 12.0})
    second = svc.create_cutting_test({'bill_id': bill.id, 'type': 4, 'container_id': container.id, 'moisture': 11.5})

    assert [t.type for t in svc.get_cutting_tests_by_bill_id(bill.id)] == [1, 2, 3, 4, 4]
    assert [t.type for t in svc.get_final_samples_by_bill_id(bill.id)] == [1, 2, 3]
    assert [t.id for t in svc.get_container_tests_by_bill_id(bill.id)] == [second.id, first.id]
    assert [t.moisture for t in svc.get_tests_with_high_moisture()] == [12.0, 11.5]
    assert [t.id for t in svc.get_tests_with_high_moisture(threshold=11.8)] == [first.id]

    dist = svc.get_moisture_distribution()
    assert dist['total_tests'] == 5
    assert dist['avg_moisture'] == 10.1
    assert dist['min_moisture'] == 7.5
    assert dist['max_moisture'] == 12.0
    assert dist['distribution'] == {'low': 1, 'medium': 2, 'high': 2}

    page = svc.get_cutting_tests_with_filters({'type': 4, 'per_page': 1})
    assert page.total == 2
    assert page.items[0].id == second.id
    assert svc.get_cutting_tests_with_filters({'moisture_min': 9, 'moisture_max': 11}).total == 2

    stats = svc.get_cutting_test_statistics()
    assert stats['high_moisture_count'] == 2


def test_computed_outturn_above_bound_is_rejected(registry):
    svc = registry.resolve(CuttingTestService)
    bill = make_bill(registry)
    with pytest.raises(ValueError, match='exceeds 60'):
        svc.create_cutting_test({'bill_id': bill.id, 'type': 1, 'w_defective_kernel': 80, 'w_good_kernel': 700})

    test = svc.create_cutting_test({'bill_id': bill.id, 'type': 1, 'w_defective_kernel': 50, 'w_good_kernel': 230})
    with pytest.raises(ValueError):
        svc.update_cutting_test(test, {'w_good_kernel': 700})
    assert svc.get_cutting_test_by_id(test.id).outturn_rate == 44.97


def test_search_and_filters_accept_query_string_values(registry):
    svc = registry.resolve(CuttingTestService)
    bill = make_bill(registry)
    other = make_bill(registry, bill_number='BL-OTHER')
    container = make_container(registry, bill.id)
    dry = svc.create_cutting_test({'bill_id': bill.id, 'type': 1, 'moisture': 8.5})
    wet = svc.create_cutting_test({'bill_id': bill.id, 'type': 4, 'container_id': container.id, 'moisture': 12.25})
    elsewhere = svc.create_cutting_test({'bill_id': other.id, 'type': 1, 'moisture': 10.0})

    found = svc.search_cutting_tests({'bill_id': str(bill.id), 'moisture_min': '9.5', 'moisture_max': ''})
    assert [t.id for t in found] == [wet.id]
    assert found[0].bill.id == bill.id
    assert found[0].container.id == container.id

    assert [t.id for t in svc.search_cutting_tests({'type': '1'})] == [dry.id, elsewhere.id]
    assert [t.id for t in svc.search_cutting_tests({})] == [dry.id, wet.id, elsewhere.id]
    assert [t.id for t in svc.search_cutting_tests({'moisture_max': '8.5'})] == [dry.id]

    page = svc.get_cutting_tests_with_filters({'moisture_min': '9.0', 'moisture_max': '12.25', 'per_page': '5'})
    assert [t.id for t in page.items] == [elsewhere.id, wet.id]
    assert svc.get_cutting_tests_with_filters({'bill_id': '', 'moisture_min': ' '}).total == 3
    with pytest.raises(ValueError):
        svc.get_cutting_tests_with_filters({'moisture_min': 'wet'})
