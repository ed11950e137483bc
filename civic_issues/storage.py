import logging
import os
import uuid

from fastapi import UploadFile

from .config import get_upload_dir

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


class LocalFileStorage:
    """Writes uploads to a directory and hands back the URL they are served at."""

    def __init__(self, directory: str):
        self.directory = directory

    def store(self, upload: UploadFile) -> str:
        os.makedirs(self.directory, exist_ok=True)

        extension = os.path.splitext(upload.filename or "")[1].lower()
        file_name = f"{uuid.uuid4().hex}{extension}"
        path = os.path.join(self.directory, file_name)

        with open(path, "wb") as out:
            out.write(upload.file.read())

        logger.info("Stored upload %r as %s", upload.filename, file_name)
        return f"{UPLOAD_URL_PREFIX}/{file_name}"


def get_storage() -> LocalFileStorage:
    """FastAPI dependency returning the configured storage backend."""
    return LocalFileStorage(get_upload_dir())
