"""Image Store - Imagens dos quizzes no GridFS (bucket ``quizImages``)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from gridfs import AsyncGridFSBucket
from gridfs.errors import NoFile

from .database import IMAGES_BUCKET, to_object_id

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"


@dataclass
class StoredImage:
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE


class ImageStore:
    """Armazenamento binario das ilustracoes.

    O content type fica em ``metadata.contentType`` junto com
    ``metadata.uploadedAt``.
    """

    def __init__(self, db: AsyncDatabase):
        self.bucket = AsyncGridFSBucket(db, bucket_name=IMAGES_BUCKET)

    async def upload(self, content: bytes, filename: str, content_type: str) -> str:
        """Grava a imagem.

        Returns:
            ID do arquivo (string)
        """
        file_id = await self.bucket.upload_from_stream(
            filename,
            content,
            metadata={
                "contentType": content_type,
                "uploadedAt": datetime.now(timezone.utc),
            },
        )
        logger.debug("Imagem gravada: %s (%d bytes)", file_id, len(content))
        return str(file_id)

    async def get(self, image_id: str) -> StoredImage | None:
        """Le a imagem; None se inexistente ou ID invalido."""
        oid = to_object_id(image_id)
        if oid is None:
            return None

        try:
            grid_out = await self.bucket.open_download_stream(oid)
        except NoFile:
            return None

        content = await grid_out.read()
        metadata = grid_out.metadata or {}
        return StoredImage(
            content=content,
            content_type=metadata.get("contentType", DEFAULT_CONTENT_TYPE),
        )

    async def delete(self, image_id: str) -> bool:
        """Remove a imagem.

        Returns:
            False se o arquivo nao existia
        """
        oid = to_object_id(image_id)
        if oid is None:
            return False

        try:
            await self.bucket.delete(oid)
        except NoFile:
            logger.warning("Imagem %s ja nao existia ao remover", image_id)
            return False
        return True
