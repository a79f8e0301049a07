import pytest

from inspection_lib.bills import BillQuery, BillRepository, BillService
from inspection_lib.containers import ContainerQuery, ContainerRepository, ContainerService
from inspection_lib.cutting_tests import CuttingTestQuery, CuttingTestRepository, CuttingTestService
from inspection_lib.dashboard import DashboardService
from inspection_lib.main import Config, create_registry
from inspection_lib.services import CyclicDependencyError, Registry, UnregisteredTypeError
from inspection_lib.services.interfaces import (
    BillServiceProtocol,
    ContainerServiceProtocol,
    CuttingTestServiceProtocol,
    StorageProtocol,
)
from inspection_lib.storage import FileStorageBackend, StorageBackend

ALL_TYPES = [
    StorageBackend,
    BillRepository, ContainerRepository, CuttingTestRepository,
    BillQuery, ContainerQuery, CuttingTestQuery,
    BillService, ContainerService, CuttingTestService,
    DashboardService,
]


def test_create_registry_builds_nothing_eagerly(tmp_path):
    registry = create_registry(Config(data_dir=str(tmp_path / 'data')))
    assert len(registry) == len(ALL_TYPES)
    assert set(registry.registrations().values()) == {'registered'}
    # storage is lazy too, so the data directory is not created yet
    assert not (tmp_path / 'data').exists()


def test_every_type_resolves_to_a_single_shared_instance(registry):
    for type_id in ALL_TYPES:
        assert registry.resolve(type_id) is registry.resolve(type_id)

    storage = registry.resolve(StorageBackend)
    assert isinstance(storage, StorageProtocol)
    # the query and the service share the same repository instance
    assert registry.resolve(BillQuery)._bills is registry.resolve(BillRepository)
    assert registry.resolve(BillService)._repository is registry.resolve(BillRepository)
    assert registry.resolve(ContainerService)._bills is registry.resolve(BillRepository)


def test_services_satisfy_their_protocols(registry):
    assert isinstance(registry.resolve(BillService), BillServiceProtocol)
    assert isinstance(registry.resolve(ContainerService), ContainerServiceProtocol)
    assert isinstance(registry.resolve(CuttingTestService), CuttingTestServiceProtocol)


def test_resolving_a_query_materializes_its_repositories_only(registry):
    registry.resolve(BillQuery)
    states = registry.registrations()
    assert states['BillQuery'] == 'materialized'
    assert states['BillRepository'] == 'materialized'
    assert states['ContainerRepository'] == 'materialized'
    assert states['BillService'] == 'registered'
    assert states['DashboardService'] == 'registered'


def test_config_drives_storage_and_thresholds(tmp_path):
    config = Config.from_server_config(
        {'serializer': 'json', 'high_moisture_threshold': 12.5, 'unknown': 1},
        data_dir=str(tmp_path), storage_backend=None,
    )
    assert config.storage_backend == 'file'
    registry = create_registry(config)

    storage = registry.resolve(StorageBackend)
    assert isinstance(storage, FileStorageBackend)
    assert storage.serializer.extension == 'json'
    assert registry.resolve(ContainerService).high_moisture_threshold == 12.5
    assert registry.resolve(CuttingTestService).high_moisture_threshold == 12.5


def test_file_backed_registry_persists_between_registries(tmp_path):
    config = Config(data_dir=str(tmp_path))
    create_registry(config).resolve(BillService).create_bill({'bill_number': 'BL-PERSIST'})

    fresh = create_registry(config)
    bills = fresh.resolve(BillService).get_all_bills().items
    assert [b.bill_number for b in bills] == ['BL-PERSIST']


def test_wiring_mistakes_surface_as_registry_errors():
    registry = Registry()
    registry.register(BillQuery, lambda r: BillQuery(
        r.resolve(BillRepository), r.resolve(ContainerRepository), r.resolve(CuttingTestRepository),
    ))
    with pytest.raises(UnregisteredTypeError):
        registry.resolve(BillQuery)

    registry.register(BillRepository, lambda r: r.resolve(BillQuery))
    with pytest.raises(CyclicDependencyError) as exc:
        registry.resolve(BillQuery)
    assert exc.value.chain == ['BillQuery', 'BillRepository', 'BillQuery']
