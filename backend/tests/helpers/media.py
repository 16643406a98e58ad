"""In-memory stand-in for the media host."""

from __future__ import annotations

import os
from contextlib import suppress

from vidtube.services._shared.ports.media_uploader import UploadedMedia


class FakeMediaUploader:
    """Record uploads and hand back deterministic URLs.

    Like the HTTP adapter it removes the local file it was given. Paths listed
    in ``fail_on`` (or every path when ``fail_all`` is set) report a failed
    upload by returning ``None``.
    """

    base_url = "https://media.test/uploads"

    def __init__(self) -> None:
        self.uploaded: list[str] = []
        self.fail_on: set[str] = set()
        self.fail_all = False

    def upload(self, local_path: str | None) -> UploadedMedia | None:
        if not local_path:
            return None
        name = os.path.basename(local_path)
        with suppress(FileNotFoundError):
            os.remove(local_path)
        if self.fail_all or local_path in self.fail_on:
            return None
        self.uploaded.append(name)
        return UploadedMedia(url=f"{self.base_url}/{name}", public_id=name)
