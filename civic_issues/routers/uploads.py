from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from ..access import SessionInfo, require_session
from ..errors import InvalidInput
from ..models.issue import UploadResponse
from ..storage import LocalFileStorage, get_storage

router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=UploadResponse)
def upload_files(
    files: List[UploadFile] = File(default=[]),
    _: SessionInfo = Depends(require_session),
    storage: LocalFileStorage = Depends(get_storage),
):
    """
    Store image files ahead of issue submission.

    Returns the URLs to pass as ``image_urls`` when creating the issue.
    """
    if not files:
        raise InvalidInput("No files provided")
    return UploadResponse(urls=[storage.store(upload) for upload in files])
