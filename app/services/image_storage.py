import os
import uuid
import logging
from dataclasses import dataclass
from typing import Optional
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings
from app.core.config import settings
from app.core.exceptions import InternalError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.webp'}


@dataclass
class StoredImage:
    url: str
    handle: str


def get_file_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def validate_image(filename: Optional[str], content_type: Optional[str], size: int) -> None:
    ext = get_file_extension(filename or '')
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            "Invalid file type",
            [f"file: allowed types are {', '.join(sorted(ALLOWED_EXTENSIONS))}"],
        )
    if not content_type or not content_type.startswith('image/'):
        raise ValidationError("File must be an image")
    if size > settings.MAX_IMAGE_SIZE:
        raise ValidationError(
            f"File size exceeds maximum allowed size of {settings.MAX_IMAGE_SIZE / 1024 / 1024:.0f}MB"
        )


class ImageStorage:
    """Event images on Azure Blob Storage. Only the URL and blob name are kept in the database"""

    def __init__(self, connection_string: Optional[str] = None, container: Optional[str] = None):
        self.connection_string = connection_string or settings.AZURE_STORAGE_CONNECTION_STRING
        self.container = container or settings.AZURE_IMAGES_CONTAINER
        self._container_client = None

    def _get_container(self):
        if not self.connection_string:
            raise InternalError(
                "Image storage is not configured. Please set AZURE_STORAGE_CONNECTION_STRING."
            )
        if self._container_client is None:
            service = BlobServiceClient.from_connection_string(self.connection_string)
            container_client = service.get_container_client(self.container)
            try:
                container_client.create_container(public_access='blob')
            except ResourceExistsError:
                pass
            self._container_client = container_client
        return self._container_client

    def upload(self, content: bytes, filename: str, content_type: str, folder: str = "events") -> StoredImage:
        validate_image(filename, content_type, len(content))

        blob_name = f"{folder}/{uuid.uuid4()}{get_file_extension(filename)}"
        try:
            blob_client = self._get_container().get_blob_client(blob_name)
            blob_client.upload_blob(
                content,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except InternalError:
            raise
        except Exception as e:
            logger.error(f"Azure blob upload error: {str(e)}")
            raise InternalError("Failed to upload image")

        logger.info(f"✅ Image uploaded successfully: {blob_client.url}")
        return StoredImage(url=blob_client.url, handle=blob_name)

    def delete(self, handle: str) -> bool:
        """Best-effort removal; storage failures are logged, not raised"""
        if not handle or not self.connection_string:
            return False
        try:
            self._get_container().delete_blob(handle)
            return True
        except ResourceNotFoundError:
            logger.warning(f"Blob {handle} already gone")
            return False
        except Exception as e:
            logger.error(f"Failed to delete blob {handle}: {str(e)}")
            return False


_storage: Optional[ImageStorage] = None


def get_image_storage() -> ImageStorage:
    global _storage
    if _storage is None:
        _storage = ImageStorage()
    return _storage
