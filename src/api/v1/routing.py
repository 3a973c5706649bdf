"""Explicit route tables turned into FastAPI routers at startup."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter


@dataclass(frozen=True)
class Route:
    """One entry of a route table: HTTP method(s), path and handler."""

    methods: tuple[str, ...]
    path: str
    endpoint: Callable[..., Any]
    response_model: Any = None
    status_code: int | None = None
    summary: str | None = None
    responses: dict[int | str, dict[str, Any]] = field(default_factory=dict)


def build_router(
    routes: Sequence[Route],
    prefix: str = "",
    tags: list[str] | None = None,
) -> APIRouter:
    """Register every route of a table on a new APIRouter.

    Raises:
        ValueError: If two entries claim the same method and path.
    """
    router = APIRouter(prefix=prefix, tags=tags or [])
    seen: set[tuple[str, str]] = set()

    for route in routes:
        for method in route.methods:
            key = (method.upper(), route.path)
            if key in seen:
                raise ValueError(f"Duplicate route {method.upper()} {prefix}{route.path}")
            seen.add(key)

        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[m.upper() for m in route.methods],
            response_model=route.response_model,
            status_code=route.status_code,
            summary=route.summary,
            responses=route.responses or None,
        )

    return router
