from typing import Any, Protocol
from datetime import date, datetime
import pickle
import json
import yaml


class Serializer(Protocol):
    """Serialize/deserialize Python values for backends that store bytes/text.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    """

    extension: str

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


class PickleSerializer:
    """Default serializer using pickle (binary).

    Records carry datetimes, which pickle round-trips without help.
    """

    extension = "pkl"

    def dump(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def load(self, data: bytes) -> Any:
        return pickle.loads(data)


def _json_default(o: Any) -> Any:
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    return o.__dict__


def _json_hook(obj: dict) -> dict:
    for k, v in obj.items():
        if isinstance(v, str) and (k.endswith("_at") or k.endswith("_date")):
            try:
                obj[k] = datetime.fromisoformat(v)
            except ValueError:
                pass
    return obj


class JSONSerializer:
    """Serializer using JSON (text).

    Datetimes are written as ISO strings and parsed back for `*_at` and
    `*_date` keys.
    """

    extension = "json"

    def dump(self, value: Any) -> bytes:
        return json.dumps(value, default=_json_default).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"), object_hook=_json_hook)


class YAMLSerializer:
    """Serializer using YAML (text). Caller must ensure values are YAML-serializable."""

    extension = "yml"

    def dump(self, value: Any) -> bytes:
        return yaml.safe_dump(value, sort_keys=False).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return yaml.safe_load(data.decode("utf-8"))


SERIALIZERS = {
    "pickle": PickleSerializer,
    "json": JSONSerializer,
    "yaml": YAMLSerializer,
}


def get_serializer(name: str) -> Serializer:
    try:
        return SERIALIZERS[name]()
    except KeyError:
        raise ValueError(f"Unknown serializer '{name}'")
