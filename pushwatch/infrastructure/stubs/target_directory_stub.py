"""Target directory stub with a fixed set of targets."""

from __future__ import annotations

from pushwatch.application.ports.target_directory import TargetDirectoryProtocol


class TargetDirectoryStub(TargetDirectoryProtocol):
    """Returns a fixed name -> id mapping."""

    def __init__(self, targets: dict[str, str] | None = None) -> None:
        self._targets = dict(targets or {})

    async def list_targets(self) -> dict[str, str]:
        return dict(self._targets)
