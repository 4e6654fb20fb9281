"""
Locally held files: images staged for upload and CSV/ZIP import sources.
"""

from typing import Tuple

from pydantic import BaseModel, Field


class StagedFile(BaseModel):
    """A file selected by the admin and held in memory until submission"""
    filename: str = Field(..., min_length=1)
    content_type: str = Field(default="application/octet-stream")
    content: bytes = Field(default=b"", repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_image(self) -> bool:
        return self.content_type.lower().startswith("image/")

    @property
    def is_zip(self) -> bool:
        return (
            self.filename.lower().endswith(".zip")
            or self.content_type.lower() in ("application/zip", "application/x-zip-compressed")
        )

    def as_part(self) -> Tuple[str, bytes, str]:
        """(filename, content, content type) tuple for an httpx multipart field"""
        return (self.filename, self.content, self.content_type)


# Import sources use the same shape as staged images
UploadedFile = StagedFile
