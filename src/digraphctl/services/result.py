"""ServiceResult and ServiceError — the service-layer contract.

INVARIANT: All service-layer methods return ServiceResult; domain errors
become ``ok=False`` results with a stable error ``code``.  The CLI consumes
this type for output routing and exit codes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"render_graph"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry, timing).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls, op: str, code: str, message: str, **detail: Any
    ) -> ServiceResult:
        """Shorthand for an ``ok=False`` result."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    def without_data(self, *keys: str, **extra: Any) -> ServiceResult:
        """Copy with *keys* dropped from ``data`` and *extra* placed first."""
        kept = {k: v for k, v in self.data.items() if k not in keys}
        return self.model_copy(update={"data": {**extra, **kept}})
