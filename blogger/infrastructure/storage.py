# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Cover image storage adapters."""

from __future__ import annotations

import asyncio
import base64
import mimetypes
import uuid
from pathlib import Path

import cloudinary.exceptions
import cloudinary.uploader

from blogger.domain.posts.entities import Cover
from blogger.domain.posts.repositories import AssetStore
from blogger.shared.config import AssetStoreConfig
from blogger.shared.errors import InfrastructureError, UploadError
from blogger.shared.logging import logger


class LocalAssetStore(AssetStore):
    """Stores covers on the local filesystem within the configured root."""

    def __init__(self, root: Path, *, public_base_url: str = "", url_prefix: str = "/uploads") -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)
        self._url_base = f"{public_base_url.rstrip('/')}{url_prefix}"

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, asset_id: str) -> Path:
        path = (self._root / asset_id).resolve()
        if path.parent != self._root.resolve():
            msg = "Attempted directory traversal outside storage root"
            raise ValueError(msg)
        return path

    async def upload(self, data: bytes, mime_type: str) -> Cover:
        extension = mimetypes.guess_extension(mime_type) or ".bin"
        asset_id = f"{uuid.uuid4().hex}{extension}"
        file_path = self._resolve(asset_id)
        try:
            await asyncio.to_thread(file_path.write_bytes, data)
        except OSError as exc:
            raise UploadError(reason=exc.strerror or type(exc).__name__) from exc
        logger.debug(f"storage.local: write path={file_path} size={len(data)}")
        return Cover(asset_id=asset_id, url=f"{self._url_base}/{asset_id}")

    async def delete(self, asset_id: str) -> bool:
        file_path = self._resolve(asset_id)
        try:
            await asyncio.to_thread(file_path.unlink)
        except FileNotFoundError:
            return False
        logger.debug(f"storage.local: removed path={file_path}")
        return True


class CloudinaryAssetStore(AssetStore):
    """Remote object store; the payload is sent as a base64 data URI."""

    def __init__(self, *, cloud_name: str, api_key: str, api_secret: str, folder: str = "blogger") -> None:
        self._folder = folder
        # passed per call instead of cloudinary.config() so instances stay independent
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }

    async def upload(self, data: bytes, mime_type: str) -> Cover:
        data_uri = f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                data_uri,
                folder=self._folder,
                resource_type="auto",
                **self._credentials,
            )
        except cloudinary.exceptions.Error as exc:
            raise UploadError(reason=str(exc)) from exc
        logger.debug(f"storage.cloudinary: uploaded public_id={result['public_id']}")
        return Cover(asset_id=result["public_id"], url=result["secure_url"])

    async def delete(self, asset_id: str) -> bool:
        result = await asyncio.to_thread(cloudinary.uploader.destroy, asset_id, **self._credentials)
        outcome = result.get("result")
        logger.debug(f"storage.cloudinary: destroy public_id={asset_id} result={outcome}")
        if outcome == "ok":
            return True
        if outcome == "not found":
            return False
        raise InfrastructureError(
            "asset_delete_failed", context={"asset_id": asset_id, "result": outcome}
        )


def build_asset_store(config: AssetStoreConfig) -> AssetStore:
    if config.backend == "cloudinary":
        return CloudinaryAssetStore(
            cloud_name=config.cloud_name or "",
            api_key=config.api_key or "",
            api_secret=config.api_secret or "",
            folder=config.folder,
        )
    return LocalAssetStore(config.uploads_dir, public_base_url=config.public_base_url)


__all__ = ["CloudinaryAssetStore", "LocalAssetStore", "build_asset_store"]
