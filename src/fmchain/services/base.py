"""BaseService — shared foundation for fmchain services.

Every service receives a :class:`Vault` and the normalized folder
mappings at construction time, plus an optional plugin manager for
notifications.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fmchain.infrastructure.filesystem import PathEscapesVaultError
from fmchain.infrastructure.templates import TemplateLoader
from fmchain.services.result import ServiceResult

if TYPE_CHECKING:
    from fmchain.domain.chain import TemplateMapping
    from fmchain.infrastructure.vault import Vault
    from fmchain.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def io_error(op: str, path: str, exc: Exception) -> ServiceResult:
    """Categorise a filesystem failure into a ServiceResult error."""
    match exc:
        case FileNotFoundError():
            code, message = "FILE_NOT_FOUND", f"File not found: {path}"
        case PermissionError():
            code, message = "PERMISSION_DENIED", f"Permission denied: {path}"
        case PathEscapesVaultError():
            code, message = "PATH_ESCAPES_VAULT", f"Path escapes vault root: {path}"
        case _:
            code, message = "UNKNOWN", f"Failed to process {path}: {exc}"
    logger.debug("%s failed for %s", op, path, exc_info=exc)
    return ServiceResult.failure(op, code, message, detail={"path": path})


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ApplyService(BaseService):
            def apply_to_file(self, path: str) -> ServiceResult:
                chain = self._resolve(path)
                ...
    """

    def __init__(
        self,
        vault: Vault,
        mappings: dict[str, TemplateMapping],
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._vault = vault
        self._mappings = mappings
        self._plugins = plugin_manager
        self._loader = TemplateLoader(vault)

    def _notify(self, hook_name: str, warnings: list[str], **kwargs: Any) -> None:
        """Dispatch a plugin hook. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        self._plugins.notify(hook_name, warnings, **kwargs)
