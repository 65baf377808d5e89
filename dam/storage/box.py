"""Thin Box client over the REST API.

Authentication runs as the enterprise service account. With a public key id and
a private key configured it signs a JWT assertion (the Box JWT app type);
otherwise it uses the client-credentials grant. Calls are single-shot: no
retries, one exception per failed call.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

import jwt
import requests
from cryptography.hazmat.primitives import serialization

from dam.exceptions import PermissionDenied, classify_remote_error
from dam.metrics import storage_requests_total
from dam.records.ids import generate_asset_key

logger = logging.getLogger(__name__)

API_BASE = "https://api.box.com/2.0"
UPLOAD_URL = "https://upload.box.com/api/2.0/files/content"
TOKEN_URL = "https://api.box.com/oauth2/token"
WEB_FILE_URL = "https://app.box.com/file/{file_id}"
JWT_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
JWT_TTL_SECONDS = 45

WRITE_PERMISSION_HINT = (
    'ensure the app has "Write all files and folders" permission '
    "and is authorized by your Box administrator"
)


@dataclass(frozen=True)
class UploadedFile:
    file_id: str
    url: str
    name: str = ""


def build_jwt_assertion(
    client_id: str,
    enterprise_id: str,
    public_key_id: str,
    private_key: str,
    passphrase: str = "",
) -> str:
    """Sign the enterprise assertion Box exchanges for an access token."""

    pem = private_key.replace("\\n", "\n").encode("utf-8")
    key = serialization.load_pem_private_key(pem, password=passphrase.encode("utf-8") or None)
    now = int(time.time())
    claims = {
        "iss": client_id,
        "sub": enterprise_id,
        "box_sub_type": "enterprise",
        "aud": TOKEN_URL,
        "jti": uuid.uuid4().hex,
        "exp": now + JWT_TTL_SECONDS,
    }
    return jwt.encode(claims, key, algorithm="RS256", headers={"kid": public_key_id})


class BoxStorage:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        enterprise_id: str,
        folder_id: str = "0",
        timeout: float = 30,
        session: requests.Session | None = None,
        public_key_id: str = "",
        private_key: str = "",
        passphrase: str = "",
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.enterprise_id = enterprise_id
        self.folder_id = folder_id or "0"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.public_key_id = public_key_id
        self.private_key = private_key
        self.passphrase = passphrase
        self._token: str | None = None
        self._token_expires_at = 0.0

    @property
    def auth_mode(self) -> str:
        return "jwt" if self.public_key_id and self.private_key else "client_credentials"

    # -- plumbing ------------------------------------------------------------
    def _token_request(self) -> dict[str, str]:
        if self.auth_mode == "jwt":
            return {
                "grant_type": JWT_GRANT_TYPE,
                "assertion": build_jwt_assertion(
                    self.client_id,
                    self.enterprise_id,
                    self.public_key_id,
                    self.private_key,
                    self.passphrase,
                ),
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            }
        return {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "box_subject_type": "enterprise",
            "box_subject_id": self.enterprise_id,
        }

    def _access_token(self) -> str:
        if self._token and time.time() < self._token_expires_at - 60:
            return self._token
        resp = self.session.post(TOKEN_URL, data=self._token_request(), timeout=self.timeout)
        resp.raise_for_status()
        payload = resp.json()
        self._token = str(payload["access_token"])
        self._token_expires_at = time.time() + float(payload.get("expires_in", 3600))
        return self._token

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._access_token()}"
        resp = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        return resp

    def _call(self, operation: str, func, *args: Any, hint: str | None = None, **kwargs: Any):
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            storage_requests_total.labels(operation=operation, outcome="error").inc()
            logger.error("Box %s failed: %s", operation, exc)
            raise classify_remote_error(operation, exc, hint) from exc
        storage_requests_total.labels(operation=operation, outcome="ok").inc()
        return result

    def _file_shared_link(self, file_id: str) -> dict[str, Any] | None:
        resp = self._request("GET", f"{API_BASE}/files/{file_id}", params={"fields": "shared_link"})
        return resp.json().get("shared_link")

    def _create_shared_link(self, file_id: str, access: str) -> dict[str, Any] | None:
        resp = self._request(
            "PUT",
            f"{API_BASE}/files/{file_id}",
            params={"fields": "shared_link"},
            json={
                "shared_link": {
                    "access": access,
                    "permissions": {"can_download": True, "can_preview": True},
                }
            },
        )
        return resp.json().get("shared_link")

    # -- operations ----------------------------------------------------------
    def upload(
        self,
        data: bytes,
        filename: str,
        folder_id: str | None = None,
        content_type: str = "application/octet-stream",
    ) -> UploadedFile:
        """Upload *data* and return its Box id plus the best available link."""

        name = filename.rsplit("/", 1)[-1] or filename
        folder = folder_id or self.folder_id
        logger.info("Box upload %s -> folder %s", name, folder)

        def _upload() -> str:
            attributes = json.dumps({"name": name, "parent": {"id": folder}})
            resp = self._request(
                "POST",
                UPLOAD_URL,
                files={
                    "attributes": (None, attributes),
                    "file": (name, data, content_type),
                },
            )
            return str(resp.json()["entries"][0]["id"])

        file_id = self._call("upload file to Box", _upload, hint=WRITE_PERMISSION_HINT)

        try:
            link = self._call("create shared link", self._create_shared_link, file_id, "company")
        except Exception as exc:
            logger.warning("Could not create shared link for %s, using web URL: %s", file_id, exc)
            return UploadedFile(file_id=file_id, url=WEB_FILE_URL.format(file_id=file_id), name=name)
        link = link or {}
        url = link.get("download_url") or link.get("url") or WEB_FILE_URL.format(file_id=file_id)
        return UploadedFile(file_id=file_id, url=url, name=name)

    def upload_asset(self, data: bytes, original_filename: str, content_type: str) -> UploadedFile:
        return self.upload(data, generate_asset_key(original_filename), content_type=content_type)

    def shared_link(self, file_id: str) -> str:
        def _link() -> str:
            link = self._file_shared_link(file_id)
            if not link:
                link = self._create_shared_link(file_id, "open") or {}
            return link.get("download_url") or link.get("url") or ""

        return self._call("get shared link", _link)

    def download_url(self, file_id: str) -> str:
        def _download() -> str:
            link = self._file_shared_link(file_id)
            if link and link.get("download_url"):
                return link["download_url"]
            if not link:
                created = self._create_shared_link(file_id, "company")
                if created and created.get("download_url"):
                    return created["download_url"]
            if link and link.get("url"):
                return link["url"]
            return WEB_FILE_URL.format(file_id=file_id)

        return self._call("get download URL", _download)

    def delete(self, file_id: str) -> None:
        self._call("delete file from Box", self._request, "DELETE", f"{API_BASE}/files/{file_id}")

    def check_connection(self) -> str:
        try:
            me = self._request("GET", f"{API_BASE}/users/me").json()
        except requests.RequestException as exc:
            status = getattr(getattr(exc, "response", None), "status_code", None)
            if status == 400 or "not authorized" in str(exc).lower():
                raise PermissionDenied(
                    "connect to Box",
                    "Box app is not authorized. Your Box administrator must authorize the app "
                    f"in the Admin Console (Client ID: {self.client_id})",
                ) from exc
            raise classify_remote_error("connect to Box", exc) from exc
        return f"Connected to Box successfully. Service Account: {me.get('name')} (ID: {me.get('id')})"
