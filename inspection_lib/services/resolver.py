from typing import Any, Callable, Hashable

from fastapi import HTTPException
from starlette.requests import Request

from .errors import UnregisteredTypeError


def resolve_service(request: Request, type_id: Hashable) -> Any:
    """Resolve a service from the registry attached to the host application.

    The registry must be exposed as `app.state.registry`. A missing registry
    or an unregistered type is a wiring bug and surfaces as HTTP 500.
    """
    registry = getattr(request.app.state, 'registry', None)
    if registry is None:
        raise HTTPException(status_code=500, detail="Service registry not configured")
    try:
        return registry.resolve(type_id)
    except UnregisteredTypeError as e:
        raise HTTPException(status_code=500, detail=str(e))


def resolve_optional_service(request: Request, type_id: Hashable) -> Any:
    """Like `resolve_service` but returns None when nothing is registered."""
    registry = getattr(request.app.state, 'registry', None)
    if registry is None:
        return None
    try:
        return registry.resolve(type_id)
    except UnregisteredTypeError:
        return None


def provide(type_id: Hashable) -> Callable[[Request], Any]:
    """Build a FastAPI dependency that resolves `type_id` per request.

        @app.get('/bills')
        def bills(service: BillService = Depends(provide(BillService))): ...
    """
    def _dependency(request: Request) -> Any:
        return resolve_service(request, type_id)

    _dependency.__name__ = f"provide_{getattr(type_id, '__name__', type_id)}"
    return _dependency
