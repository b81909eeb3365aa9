"""Paste API routes."""

from fastapi import APIRouter, status

from dropcommon.types import Paste
from dropserver import utils
from dropserver.schemas.common import SuccessResponse
from dropserver.schemas.paste import (
    CreatePasteRequest,
    CreatePasteResponse,
    PasteFileModel,
    PasteResponse,
    UpdatePasteRequest,
)
from dropserver.services.paste_service import PasteService

router = APIRouter(prefix="/paste", tags=["Paste"])


@router.post("", response_model=CreatePasteResponse, status_code=status.HTTP_201_CREATED)
def create_paste(request: CreatePasteRequest):
    """
    Store text, one file, or a batch of files under a new code.

    Parameters:
        - content: Text, or a data URI when isFile is set
        - files: List of {name, type, content} when isMultiFile is set
        - expirationOption: '5min' ... '30days' (default 30min)
        - allowEditing: Allow later edits (text only)

    Returns:
        - code: Public code for retrieval
        - expiresAt: Expiry as epoch milliseconds

    Raises:
        - 400: Missing, malformed or oversized content
        - 500: Storage error
    """
    paste_service = PasteService()

    files = [f.model_dump() for f in request.files] if request.files else None

    paste = paste_service.create_paste(
        content=request.content,
        files=files,
        is_file=request.is_file,
        is_multi_file=request.is_multi_file,
        file_name=request.file_name,
        file_type=request.file_type,
        expiration_option=request.expiration_option,
        allow_editing=request.allow_editing,
    )

    return CreatePasteResponse(code=paste.code, expires_at=paste.expires_at)


@router.get("/{code}", response_model=PasteResponse)
def get_paste(code: str):
    """
    Retrieve a paste and count the access.

    Raises:
        - 400: Code is not numeric
        - 404: Not found or expired
    """
    paste_service = PasteService()

    paste = paste_service.get_paste(code)

    return _to_response(paste)


@router.put("", response_model=SuccessResponse)
def update_paste(request: UpdatePasteRequest):
    """
    Replace the content of an editable text paste.

    Raises:
        - 400: Missing code or content
        - 403: Editing disabled, or the paste holds files
        - 404: Not found or expired
    """
    paste_service = PasteService()

    paste_service.update_paste(request.code, request.content)

    return SuccessResponse()


@router.delete("/{code}", response_model=SuccessResponse)
def delete_paste(code: str):
    """
    Remove a paste. Deleting an unknown code succeeds.

    Raises:
        - 400: Code is not numeric
    """
    paste_service = PasteService()

    paste_service.delete_paste(code)

    return SuccessResponse()


def _to_response(paste: Paste) -> PasteResponse:
    return PasteResponse(
        code=paste.code,
        content=paste.content,
        created_at=paste.created_at,
        expires_at=paste.expires_at,
        time_remaining=max(paste.expires_at - utils.now_ms(), 0),
        file_name=paste.file_name,
        file_type=paste.file_type,
        is_file=paste.is_file and not paste.is_multi_file,
        files=[PasteFileModel(name=f.name, type=f.type, content=f.content) for f in paste.files],
        is_multi_file=paste.is_multi_file,
        allow_editing=paste.allow_editing,
        download_count=paste.download_count,
    )
