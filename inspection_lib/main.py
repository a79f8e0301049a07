"""Composition root for the inspection tool.

`create_registry(config)` performs the single registration pass for the
whole application and returns the populated Registry. Nothing is built
here: every factory runs lazily on first `resolve`, and the order of the
`register` calls below documents the dependency layering

    storage -> repositories -> queries -> services -> dashboard

To wire an application:

    from inspection_lib.main import Config, create_registry
    registry = create_registry(Config(data_dir="data"))
    bills = registry.resolve(BillService)

A host web application stores the registry on `app.state.registry`; see
`inspection_lib.services.resolver`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from inspection_lib.bills import BillQuery, BillRepository, BillService
from inspection_lib.containers import ContainerQuery, ContainerRepository, ContainerService
from inspection_lib.cutting_tests import CuttingTestQuery, CuttingTestRepository, CuttingTestService
from inspection_lib.dashboard import DashboardService
from inspection_lib.services import Registry
from inspection_lib.storage import StorageBackend, create_storage

logger = logging.getLogger(__name__)


@dataclass
class Config:
    data_dir: str = "data"
    storage_backend: str = "file"
    serializer: str = "pickle"
    high_moisture_threshold: float = 11.0
    per_page: int = 15

    @classmethod
    def from_server_config(cls, server_cfg: Optional[Dict[str, Any]], **overrides: Any) -> "Config":
        """Overlay known keys from the stored server config, then `overrides`."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (server_cfg or {}).items() if k in known and v is not None}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def create_registry(config: Config, storage: Optional[StorageBackend] = None) -> Registry:
    """Register every application type and return the registry.

    Pass `storage` to reuse an existing backend (tests use an in-memory one);
    otherwise one is created from `config` on first use.
    """
    registry = Registry()

    # Storage
    if storage is not None:
        registry.register_singleton(StorageBackend, storage)
    else:
        registry.register(StorageBackend, lambda: create_storage(
            backend=config.storage_backend,
            serializer=config.serializer,
            data_dir=config.data_dir,
        ))

    # Repositories
    registry.register(BillRepository, lambda r: BillRepository(r.resolve(StorageBackend)))
    registry.register(ContainerRepository, lambda r: ContainerRepository(r.resolve(StorageBackend)))
    registry.register(CuttingTestRepository, lambda r: CuttingTestRepository(r.resolve(StorageBackend)))

    # Queries
    registry.register(BillQuery, lambda r: BillQuery(
        r.resolve(BillRepository),
        r.resolve(ContainerRepository),
        r.resolve(CuttingTestRepository),
    ))
    registry.register(ContainerQuery, lambda r: ContainerQuery(
        r.resolve(ContainerRepository),
        r.resolve(CuttingTestRepository),
        r.resolve(BillRepository),
    ))
    registry.register(CuttingTestQuery, lambda r: CuttingTestQuery(
        r.resolve(CuttingTestRepository),
        r.resolve(BillRepository),
        r.resolve(ContainerRepository),
    ))

    # Services
    registry.register(BillService, lambda r: BillService(
        r.resolve(BillRepository),
        r.resolve(BillQuery),
        per_page=config.per_page,
    ))
    registry.register(ContainerService, lambda r: ContainerService(
        r.resolve(ContainerRepository),
        r.resolve(ContainerQuery),
        r.resolve(BillRepository),
        high_moisture_threshold=config.high_moisture_threshold,
        per_page=config.per_page,
    ))
    registry.register(CuttingTestService, lambda r: CuttingTestService(
        r.resolve(CuttingTestRepository),
        r.resolve(CuttingTestQuery),
        r.resolve(BillRepository),
        r.resolve(ContainerRepository),
        high_moisture_threshold=config.high_moisture_threshold,
    ))
    registry.register(DashboardService, lambda r: DashboardService(
        r.resolve(BillService),
        r.resolve(ContainerService),
        r.resolve(CuttingTestService),
    ))

    logger.info("Registered %d services", len(registry))
    return registry
