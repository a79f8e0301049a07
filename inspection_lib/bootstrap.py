"""Bootstrap helpers for startup.

Ensures the YAML server config exists on disk and
returns it, so `inspection_lib.main` only deals with composing services.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_SERVER_CONFIG: Dict[str, Any] = {
    'schema_version': 1,
    'log_level': 'INFO',
    'storage_backend': 'file',
    'serializer': 'pickle',
    'high_moisture_threshold': 11.0,
    'per_page': 15,
}


def bootstrap_server(config_path: Union[str, Path], logger: Optional[logging.Logger] = None) -> dict:
    """Ensure the YAML server config exists at `config_path` and return it.

    A missing file is created from DEFAULT_SERVER_CONFIG. A file that does
    not contain a mapping raises ValueError.
    """
    logger = logger or logging.getLogger(__name__)
    path = Path(config_path)
    if not path.exists():
        logger.info("%s missing; creating default server config", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open('w', encoding='utf-8') as f:
            yaml.safe_dump(DEFAULT_SERVER_CONFIG, f, sort_keys=False)
        return dict(DEFAULT_SERVER_CONFIG)

    with path.open('r', encoding='utf-8') as f:
        try:
            server_cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"invalid server config {path}: parse error") from e
    if not isinstance(server_cfg, dict):
        raise ValueError(f"invalid server config {path}: expected mapping")
    return server_cfg
