"""The envelope every service operation returns.

Services never raise for expected failures. A rejected card, an unknown
order index or a malformed batch file comes back as ``ok=False`` with a
:class:`ServiceError` whose ``code`` the CLI and JSON consumers can match on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from pcorder.domain.errors import PcOrderError


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: False when ``error`` is set.
        op: Operation name, e.g. ``"place_order"``; selects the renderer.
        data: Operation payload.
        warnings: Things the caller should know about even though the call
            succeeded (cards about to expire, ignored transitions, failing
            plugins, rejected batch rows).
        error: Set on failure.
        meta: Extras such as telemetry timings.
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
        cls,
        op: str,
        code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

    @classmethod
    def from_exception(cls, op: str, exc: PcOrderError) -> ServiceResult:
        """Fold a domain error into a failure carrying the error's code."""
        return cls.failure(op, exc.code, str(exc))
