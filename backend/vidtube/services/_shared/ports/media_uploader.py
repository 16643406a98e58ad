from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class UploadedMedia:
    """
    Result of a successful upload to the media host.

    :ivar url: Public URL of the stored asset.
    :ivar public_id: Host-side identifier, when the host returns one.
    """

    url: str
    public_id: str | None = None


class MediaUploader(Protocol):
    """
    Port for pushing a locally staged file to the media host.

    Implementations return ``None`` on any failure instead of raising and
    remove the local file whatever the outcome.
    """

    def upload(self, local_path: str | None) -> UploadedMedia | None: ...
