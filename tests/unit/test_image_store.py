# =============================================================================
# TESTES - Image Store
# =============================================================================
# Testes unitarios para imagens no GridFS (bucket mockado)
# =============================================================================

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId


@pytest.fixture
def bucket():
    mock = MagicMock()
    mock.upload_from_stream = AsyncMock(return_value=ObjectId())
    mock.open_download_stream = AsyncMock()
    mock.delete = AsyncMock()
    return mock


@pytest.fixture
def image_store(mock_db, bucket):
    from quiz.storage.image_store import ImageStore

    with patch("quiz.storage.image_store.AsyncGridFSBucket", return_value=bucket) as factory:
        store = ImageStore(mock_db)
    factory.assert_called_once_with(mock_db, bucket_name="quizImages")
    return store


class TestImageStore:
    @pytest.mark.asyncio
    async def test_upload_stores_content_type(self, image_store, bucket):
        image_id = await image_store.upload(b"bytes", "quiz.png", "image/png")

        assert image_id == str(bucket.upload_from_stream.return_value)
        args, kwargs = bucket.upload_from_stream.call_args
        assert args == ("quiz.png", b"bytes")
        assert kwargs["metadata"]["contentType"] == "image/png"
        assert "uploadedAt" in kwargs["metadata"]

    @pytest.mark.asyncio
    async def test_get(self, image_store, bucket):
        grid_out = MagicMock()
        grid_out.read = AsyncMock(return_value=b"jpeg-bytes")
        grid_out.metadata = {"contentType": "image/jpeg"}
        bucket.open_download_stream.return_value = grid_out

        image = await image_store.get(str(ObjectId()))

        assert image.content == b"jpeg-bytes"
        assert image.content_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_get_missing(self, image_store, bucket):
        from gridfs.errors import NoFile

        bucket.open_download_stream.side_effect = NoFile("missing")

        assert await image_store.get(str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, image_store, bucket):
        assert await image_store.get("not-an-id") is None
        bucket.open_download_stream.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_missing(self, image_store, bucket):
        from gridfs.errors import NoFile

        bucket.delete.side_effect = NoFile("missing")

        assert await image_store.delete(str(ObjectId())) is False

    @pytest.mark.asyncio
    async def test_delete(self, image_store, bucket):
        oid = ObjectId()

        assert await image_store.delete(str(oid)) is True
        bucket.delete.assert_awaited_once_with(oid)
