import json
import os
from logging import getLogger
from typing import NamedTuple

from requests.exceptions import RequestException

from dam.exceptions import DamApiError

from .exceptions import UploadFailed

logger = getLogger(__name__)


class UploadRequest(NamedTuple):
    file_path: str
    brand_id: str
    display_name: str


class RemoteAssetHandle(NamedTuple):
    remote_id: str


def upload_asset(client, upload_request):
    """
    Send the file of ``upload_request`` to the DAM and return the handle of
    the remote asset.

    Raises:
        UploadFailed: The request is incomplete, the file cannot be read, the
            DAM call failed or the DAM did not report success with an asset ID.
    """
    if not upload_request.brand_id:
        raise UploadFailed("A brand is required to upload media to the DAM")
    if not upload_request.display_name:
        raise UploadFailed("A name is required to upload media to the DAM")

    file_path = upload_request.file_path
    if not file_path or not os.path.isfile(file_path):
        raise UploadFailed(f"File not found: {file_path}", file_path=file_path)
    if not os.access(file_path, os.R_OK):
        raise UploadFailed(f"File is not readable: {file_path}", file_path=file_path)

    try:
        upload_result = client.upload_asset(upload_request)
    except (OSError, RequestException, DamApiError) as exc:
        logger.exception("Unable to upload %s to the DAM", file_path)
        raise UploadFailed(
            f"There was an error uploading the file {file_path}: {exc}",
            file_path=file_path,
        ) from exc

    if not isinstance(upload_result, dict) or upload_result.get("success") is not True:
        raise UploadFailed(
            "There was an error while uploading this media. (%s)"
            % json.dumps(upload_result, default=str),
            file_path=file_path,
            upload_result=upload_result,
        )

    remote_id = str(upload_result.get("mediaid") or "").strip()
    if not remote_id:
        raise UploadFailed(
            "The DAM accepted the upload without returning an asset ID. (%s)"
            % json.dumps(upload_result, default=str),
            file_path=file_path,
            upload_result=upload_result,
        )

    return RemoteAssetHandle(remote_id)
