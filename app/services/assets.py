"""
Blog asset upload service.

Stages multipart files on local disk, validates them, pushes them to the
configured storage backend and keeps track of what was stored so a failed
write can remove it again.
"""

from asyncio import wait_for
from collections.abc import AsyncGenerator, Iterable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path, PurePath
from types import TracebackType
from typing import Self
from uuid import uuid4

import aiofiles
from fastapi import UploadFile

from app.configs.settings import MAX_SECTION_IMAGES, settings
from app.errors.upload import (
    ImageTooLargeError,
    MediaLimitExceededError,
    UnsupportedImageTypeError,
    UploadError,
)
from app.schemas.asset import Transformation
from app.services.storage import AssetStorage, get_storage_service
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StagedFile:
    """An uploaded file copied to the staging directory."""

    field: str
    filename: str
    content_type: str
    path: Path

    @property
    def stem(self) -> str:
        return PurePath(self.filename).stem


@dataclass
class StagedUploads:
    """Files of one request, staged and validated."""

    main_image: StagedFile | None = None
    section_images: list[StagedFile] = field(default_factory=list)

    @property
    def files(self) -> list[StagedFile]:
        head = [self.main_image] if self.main_image else []
        return head + self.section_images


class AssetUploader:
    """
    Upload and delete blog assets through an ``AssetStorage`` backend.

    Every storage call is bounded by ``ASSET_TIMEOUT_SECONDS``. Uploads
    raise ``UploadError`` on failure; deletes never raise.
    """

    def __init__(
        self,
        storage: AssetStorage | None = None,
        tmp_dir: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the uploader.

        Args:
            storage: Optional storage backend. If not provided,
                    the configured backend will be used.
            tmp_dir: Staging directory for incoming files
            timeout: Seconds allowed for each storage call
        """
        self.storage = storage or get_storage_service()
        self.tmp_dir = tmp_dir or settings.UPLOAD_TMP_DIR
        self.timeout = timeout or settings.ASSET_TIMEOUT_SECONDS
        self.max_size_bytes = settings.MEDIA_IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.allowed_types = settings.MEDIA_IMAGE_ALLOWED_TYPES

    def _validate_image_type(self, content_type: str | None) -> None:
        """Validate image content type."""
        if not content_type or content_type not in self.allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.allowed_types,
            )

    def validate_request(
        self,
        main_image: UploadFile | None,
        section_images: Sequence[UploadFile],
    ) -> None:
        """Check file count and content types before anything is read."""
        if len(section_images) > MAX_SECTION_IMAGES:
            raise MediaLimitExceededError(field="section_images", max_count=MAX_SECTION_IMAGES)
        for upload in [main_image, *section_images]:
            if upload is not None:
                self._validate_image_type(upload.content_type)

    async def _stage(self, upload: UploadFile, field_name: str) -> StagedFile:
        """Stream one upload to the staging directory, enforcing the size limit."""
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        filename = upload.filename or field_name
        suffix = PurePath(filename).suffix.lower() or ".img"
        path = self.tmp_dir / f"{uuid4().hex}{suffix}"

        written = 0
        try:
            async with aiofiles.open(path, "wb") as out:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_size_bytes:
                        raise ImageTooLargeError(
                            max_size_mb=settings.MEDIA_IMAGE_MAX_SIZE_MB,
                            actual_size_mb=written / (1024 * 1024),
                        )
                    await out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        return StagedFile(
            field=field_name,
            filename=filename,
            content_type=upload.content_type or "",
            path=path,
        )

    @asynccontextmanager
    async def staging(
        self,
        main_image: UploadFile | None,
        section_images: Sequence[UploadFile],
    ) -> AsyncGenerator[StagedUploads]:
        """
        Stage the request's files for the duration of the block.

        Staged copies are removed on exit whether or not the block succeeds.
        """
        self.validate_request(main_image, section_images)
        staged = StagedUploads()
        try:
            if main_image is not None:
                staged.main_image = await self._stage(main_image, "main_image")
            for upload in section_images:
                staged.section_images.append(await self._stage(upload, "section_image"))
            yield staged
        finally:
            for staged_file in staged.files:
                staged_file.path.unlink(missing_ok=True)

    async def upload(
        self,
        staged: StagedFile,
        transformations: Sequence[Transformation] = (),
    ) -> str:
        """
        Push one staged file to storage.

        Raises:
            UploadError: If the backend fails or does not answer in time
        """
        try:
            return await wait_for(
                self.storage.upload(staged.path, staged.field, transformations),
                timeout=self.timeout,
            )
        except TimeoutError as e:
            logger.exception(f"Upload of {staged.filename} timed out")
            raise UploadError(error=f"upload timed out after {self.timeout}s") from e
        except UploadError:
            raise
        except Exception as e:
            logger.exception(f"Upload of {staged.filename} failed")
            raise UploadError(error=str(e)) from e

    async def delete(self, url: str) -> bool:
        """Remove one stored asset; failures are logged and reported as False."""
        try:
            deleted = await wait_for(self.storage.delete(url), timeout=self.timeout)
        except TimeoutError:
            logger.warning(f"Delete of {url} timed out")
            return False
        except Exception:
            logger.exception(f"Delete of {url} failed")
            return False

        if not deleted:
            logger.warning(f"Storage did not confirm deletion of {url}")
        return deleted

    async def delete_many(self, urls: Iterable[str | None]) -> int:
        """Delete each distinct URL once, sequentially; return how many succeeded."""
        removed = 0
        for url in dict.fromkeys(u for u in urls if u):
            if await self.delete(url):
                removed += 1
        return removed

    def batch(self) -> "AssetBatch":
        return AssetBatch(self)


class AssetBatch:
    """
    Uploads belonging to one write.

    Leaving the ``async with`` block through an exception deletes every
    asset uploaded inside it, then lets the exception propagate.

    Example:
        ```python
        async with uploader.batch() as batch:
            url = await batch.upload(staged.main_image)
            await repo.update(blog, main_image=url)
            await session.commit()
        ```
    """

    def __init__(self, uploader: AssetUploader) -> None:
        self.uploader = uploader
        self.uploaded: list[str] = []

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            return
        if self.uploaded:
            logger.warning(f"Write failed, removing {len(self.uploaded)} uploaded asset(s)")
            await self.uploader.delete_many(self.uploaded)
        self.uploaded.clear()

    async def upload(
        self,
        staged: StagedFile,
        transformations: Sequence[Transformation] = (),
    ) -> str:
        url = await self.uploader.upload(staged, transformations)
        self.uploaded.append(url)
        return url
