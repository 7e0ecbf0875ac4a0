import os.path
import time
from logging import getLogger
from urllib.parse import quote, urljoin

import requests
from django.conf import settings
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout

from .exceptions import DamApiError, UnableToConnectError

logger = getLogger(__name__)

#: Session keys under which the OAuth login flow stores the access token and
#: its expiry (seconds since the epoch)
SESSION_TOKEN_KEY = "dam_access_token"
SESSION_EXPIRES_KEY = "dam_token_expires"

BRANDS_PATH = "api/v4/brands/"
UPLOAD_PATH = "api/v4/upload/"
MEDIA_INFO_PATH = "api/v4/media/{remote_id}/"


class DamClient:
    """
    Minimal client for the DAM REST API

    All calls are authenticated with the OAuth bearer token of the current
    user. HTTP errors are raised as ``requests`` exceptions so callers can
    decide whether a failure is fatal.
    """

    def __init__(self, base_url, access_token=None, token_expires=None, timeout=30):
        self.base_url = base_url.rstrip("/") + "/"
        self.access_token = access_token
        self.token_expires = token_expires
        self.timeout = timeout

    def __repr__(self):
        return "DamClient(base_url=%s)" % self.base_url

    @classmethod
    def from_session(cls, session):
        """
        Build a client for the DAM configured in ``settings.DAM`` using the
        token stored in a Django session
        """
        return cls(
            settings.DAM["BASE_URL"],
            access_token=session.get(SESSION_TOKEN_KEY),
            token_expires=session.get(SESSION_EXPIRES_KEY),
            timeout=settings.DAM.get("TIMEOUT", 30),
        )

    def has_valid_session(self):
        if not self.access_token:
            return False
        if self.token_expires is None:
            return True
        return float(self.token_expires) > time.time()

    def _request(self, method, path, **kwargs):
        url = urljoin(self.base_url, path)
        headers = kwargs.pop("headers", {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        headers.setdefault("Accept", "application/json")

        resp = requests.request(
            method, url, headers=headers, timeout=self.timeout, **kwargs
        )
        resp.raise_for_status()
        return resp

    def _json(self, resp):
        try:
            return resp.json()
        except ValueError as exc:
            raise DamApiError(
                f"{resp.request.method} {resp.url} did not return JSON", resp
            ) from exc

    def list_brands(self):
        """
        Return the brands available to the current user.

        Each brand is a dict with ``id``, ``name`` and a ``subBrands`` list of
        dicts with ``id`` and ``name``.

        Raises:
            UnableToConnectError: The DAM could not be reached.
            requests.HTTPError: The DAM rejected the request.
        """
        try:
            resp = self._request("GET", BRANDS_PATH)
        except (RequestsConnectionError, Timeout) as exc:
            raise UnableToConnectError(f"Unable to list brands: {exc}") from exc

        brands = self._json(resp)
        if not isinstance(brands, list):
            raise DamApiError("Unexpected brand list payload", resp)
        return brands

    def upload_asset(self, upload_request):
        """
        Send a local file to the DAM.

        The DAM indexes the file asynchronously: a successful answer only
        means the bytes were accepted.

        Returns:
            dict: The DAM's answer, ``{"success": bool, "mediaid": str, ...}``.

        Raises:
            OSError: The file could not be read.
            requests.RequestException: The upload request failed.
            DamApiError: The DAM did not answer with JSON.
        """
        with open(upload_request.file_path, "rb") as upload_file:
            resp = self._request(
                "POST",
                UPLOAD_PATH,
                data={
                    "brandId": upload_request.brand_id,
                    "name": upload_request.display_name,
                },
                files={
                    "file": (os.path.basename(upload_request.file_path), upload_file)
                },
            )
        logger.info(
            "Uploaded %s to %s as %s",
            upload_request.file_path,
            resp.url,
            upload_request.display_name,
        )
        return self._json(resp)

    def fetch_metadata(self, remote_id):
        """
        Return the metadata the DAM holds for ``remote_id``.

        An asset that was just uploaded is reported as missing (HTTP 404)
        until the DAM finished processing it; an empty dict means the same.

        Raises:
            DamApiError: The DAM answered with something other than a JSON
                object.
        """
        resp = self._request(
            "GET", MEDIA_INFO_PATH.format(remote_id=quote(remote_id, safe=""))
        )
        metadata = self._json(resp) or {}
        if not isinstance(metadata, dict):
            raise DamApiError("Unexpected metadata payload", resp)
        return metadata
