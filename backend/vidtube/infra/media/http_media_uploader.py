# vidtube/infra/media/http_media_uploader.py
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any

import requests

from vidtube.services._shared.ports.media_uploader import MediaUploader, UploadedMedia

log = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpMediaUploader(MediaUploader):
    """
    Push locally staged files to the media host as a multipart POST.

    The host is expected to answer with JSON carrying the public URL under
    ``secure_url`` or ``url`` (and optionally ``public_id``). Every failure
    is logged and reported as ``None``; the staged file is always removed.
    """

    upload_url: str
    api_key: str | None = None
    timeout: float = 30.0
    session: requests.Session = field(default_factory=requests.Session)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> HttpMediaUploader:
        return cls(
            upload_url=config["MEDIA_UPLOAD_URL"],
            api_key=config.get("MEDIA_UPLOAD_API_KEY"),
            timeout=float(config.get("MEDIA_UPLOAD_TIMEOUT", 30)),
        )

    def upload(self, local_path: str | None) -> UploadedMedia | None:
        if not local_path:
            return None
        try:
            return self._post(local_path)
        finally:
            with suppress(FileNotFoundError):
                os.remove(local_path)

    def _post(self, local_path: str) -> UploadedMedia | None:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            with open(local_path, "rb") as fh:
                resp = self.session.post(
                    self.upload_url,
                    files={"file": (os.path.basename(local_path), fh)},
                    headers=headers,
                    timeout=self.timeout,
                )
            resp.raise_for_status()
            body = resp.json()
        except (OSError, requests.RequestException, ValueError) as exc:
            log.warning("media.upload_failed path=%s error=%s", os.path.basename(local_path), exc)
            return None

        url = body.get("secure_url") or body.get("url") if isinstance(body, dict) else None
        if not url:
            log.warning("media.upload_failed path=%s error=missing url", os.path.basename(local_path))
            return None
        return UploadedMedia(url=str(url), public_id=body.get("public_id"))
