"""
Preview Registry

Ownership table for staged image files. Each staged file is held under an
opaque preview handle until it is released; every removal path (image
removal, color removal, form reset, close) goes through this registry so no
handle outlives the form that created it.
"""

import uuid
from typing import Dict, Iterable, Optional

from product_admin.core.logger import logger
from product_admin.models.files import StagedFile

PREVIEW_PREFIX = "blob:preview/"


def is_preview_handle(value: str) -> bool:
    return value.startswith(PREVIEW_PREFIX)


class PreviewRegistry:
    """Maps preview handles to the staged files they display"""

    def __init__(self):
        self._files: Dict[str, StagedFile] = {}

    def __len__(self) -> int:
        return len(self._files)

    def acquire(self, file: StagedFile) -> str:
        handle = f"{PREVIEW_PREFIX}{uuid.uuid4()}"
        self._files[handle] = file
        logger.debug(
            "Preview acquired",
            metadata={"event": "preview_acquired", "handle": handle, "file_name": file.filename},
        )
        return handle

    def release(self, handle: str) -> bool:
        """Release a handle; returns False when it was not owned"""
        released = self._files.pop(handle, None) is not None
        if released:
            logger.debug("Preview released", metadata={"event": "preview_released", "handle": handle})
        return released

    def release_many(self, handles: Iterable[str]) -> int:
        return sum(1 for handle in list(handles) if self.release(handle))

    def release_all(self) -> int:
        return self.release_many(list(self._files))

    def owns(self, handle: str) -> bool:
        return handle in self._files

    def file_for(self, handle: str) -> Optional[StagedFile]:
        return self._files.get(handle)
