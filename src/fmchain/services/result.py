"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Results that come out of a frontmatter merge carry its key-level
bookkeeping (``conflicts`` / ``added``) in ``data`` so the CLI, plugins
and batch summaries all read it the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from fmchain.domain.merge import MergeResult


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class MergeSummary(BaseModel):
    """Keys a merge overrode (``conflicts``) and keys it introduced (``added``)."""

    model_config = {"frozen": True}

    conflicts: list[str] = Field(default_factory=list)
    added: list[str] = Field(default_factory=list)

    @classmethod
    def of(cls, result: MergeResult) -> MergeSummary:
        return cls(conflicts=list(result.conflicts), added=list(result.added))


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"apply_template"``).
        data: Operation-specific payload.  Failed batch results keep
            their per-document data.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, dry-run flag, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        data: dict[str, Any] | None = None,
        *,
        summary: MergeSummary | None = None,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Build an ``ok`` result; *summary* is folded into ``data``."""
        payload = dict(data or {})
        if summary is not None:
            payload.update(summary.model_dump())
        return cls(ok=True, op=op, data=payload, warnings=warnings or [], meta=meta)

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Build an error result with a :class:`ServiceError` payload."""
        return cls(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError(code=code, message=message, detail=detail or {}),
            meta=meta,
        )

    @property
    def summary(self) -> MergeSummary:
        """The merge bookkeeping in ``data`` (empty when there is none)."""
        return MergeSummary(
            conflicts=self.data.get("conflicts", []),
            added=self.data.get("added", []),
        )
