from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MediaUploadResult:
    """Durable location of an uploaded media file"""
    url: str
    public_id: str = ""


class MediaUploader(ABC):
    """Port for pushing a local file to durable media storage"""

    @abstractmethod
    async def upload(self, local_path: Optional[str]) -> Optional[MediaUploadResult]:
        """Upload the file; None when the path is missing or the upload fails"""
        pass
