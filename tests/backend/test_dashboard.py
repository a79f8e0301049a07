import yaml

from inspection_lib.dashboard import DashboardService
from inspection_lib.seed import DEMO_BILL, seed_demo_data


def test_empty_dashboard(registry):
    stats = registry.resolve(DashboardService).get_statistics()
    assert stats['bills'] == {'total': 0, 'pending_final_tests': 0, 'missing_final_samples': 0, 'recent': []}
    assert stats['containers'] == {'high_moisture': 0, 'pending_tests': 0}
    assert stats['cutting_tests']['moisture_distribution']['total_tests'] == 0
    assert stats['cutting_tests']['moisture_distribution']['avg_moisture'] is None


def test_dashboard_after_seeding(registry):
    result = seed_demo_data(registry)
    assert result['created'] is True

    stats = registry.resolve(DashboardService).get_statistics()
    assert stats['bills']['total'] == 1
    assert stats['bills']['recent'] == [
        {'id': result['bill_id'], 'bill_number': DEMO_BILL['bill_number'], 'containers': 2}
    ]
    assert stats['bills']['pending_final_tests'] == 0
    assert stats['bills']['missing_final_samples'] == 0
    # second container cut reads 11.7%
    assert stats['containers']['high_moisture'] == 1
    assert stats['containers']['pending_tests'] == 0
    assert stats['cutting_tests']['moisture_distribution']['total_tests'] == 5

    # plain data, safe to dump
    assert yaml.safe_load(yaml.safe_dump(stats)) == stats


def test_seeding_is_idempotent(registry):
    first = seed_demo_data(registry)
    second = seed_demo_data(registry)
    assert second == {'created': False, 'bill_id': first['bill_id']}
    assert registry.resolve(DashboardService).get_statistics()['bills']['total'] == 1
