# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""HTTP session for the MOVEit upload API.

UploadSession owns one requests.Session and the state each step hands to
the next: bearer token, home folder id and the open file. The steps must
be called in order; each raises a moveitup exception on failure and
leaves the session untouched otherwise.

Endpoints (relative to Settings.base_url):

    POST api/v1/token                 form: grant_type, username, password
    GET  api/v1/users/self            -> homeFolderID
    GET  api/v1/folders/<id>/files    -> items[].name
    POST api/v1/folders/<id>/files    multipart part "file"

Per-request headers are passed with each call and never stored on the
underlying requests.Session, so no step inherits another step's
Content-Type or Authorization.

Example:
    Running the steps by hand:
        ```python
        from moveitup.config import load_settings
        from moveitup.session import UploadSession

        with UploadSession(load_settings()) as session:
            session.authenticate("alice", "secret")
            session.resolve_home_folder()
            session.open_file("report.pdf")
            session.check_not_on_server()
            result = session.upload()
        ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urljoin

import requests

from moveitup.config import Settings
from moveitup.exceptions import (
    DuplicateFileError,
    NetworkError,
    ResponseError,
    UploadRejectedError,
)
from moveitup.io import FileTransfer, MultipartStream, ProgressReporter
from moveitup.logging import Logger, get_global_logger
from moveitup.results import UploadResult

TOKEN_ENDPOINT = "api/v1/token"
SELF_ENDPOINT = "api/v1/users/self"
FOLDER_FILES_ENDPOINT = "api/v1/folders/{folder_id}/files"

# Multipart field name the API expects for the uploaded file.
UPLOAD_FIELD = "file"


def make_session(user_agent: str) -> requests.Session:
    """
    Create the requests.Session used for every call of one upload run.

    Only the User-Agent is set session-wide. No retry adapter is mounted:
    a failed request ends the run.
    """
    s = requests.Session()
    s.headers.update({"User-Agent": user_agent})
    return s


def _body_excerpt(response: requests.Response, limit: int = 200) -> str:
    return response.text[:limit]


class UploadSession:
    """One authenticated conversation with the upload API.

    Attributes:
        settings: Effective settings (base URL, timeout, User-Agent).
        token: Bearer token, "" until authenticate() succeeds.
        home_folder_id: Home folder id, 0 until resolve_home_folder() succeeds.
        transfer: The open file, None until open_file() succeeds.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        logger: Logger | None = None,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.token = ""
        self.home_folder_id = 0
        self.transfer: FileTransfer | None = None
        self._logger = logger or get_global_logger()
        self._reporter = reporter or ProgressReporter()
        self._http: requests.Session | None = None

    # ------------------------------------------------------------------ #
    # Lifetime
    # ------------------------------------------------------------------ #

    def __enter__(self) -> UploadSession:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> None:
        """Acquire the HTTP client for this session."""
        if self._http is None:
            self._http = make_session(self.settings.user_agent)
            self._logger.debug("HTTP", f"Session opened for {self.settings.base_url}")

    def close(self) -> None:
        """Release the open file and the HTTP client. Safe to call twice."""
        try:
            if self.transfer is not None and not self.transfer.closed:
                self.transfer.close()
        finally:
            if self._http is not None:
                self._http.close()
                self._http = None

    # ------------------------------------------------------------------ #
    # Request plumbing
    # ------------------------------------------------------------------ #

    def _url(self, endpoint: str) -> str:
        return urljoin(self.settings.base_url, endpoint)

    def _bearer(self) -> str:
        return f"Bearer {self.token}"

    def _request(
        self,
        method: str,
        endpoint: str,
        headers: dict[str, str],
        **kwargs: Any,
    ) -> requests.Response:
        """Send one request; transport failures become NetworkError.

        Redirects are not followed: each step judges the status of its own
        request, and a streamed upload body cannot be replayed.
        """
        if self._http is None:
            self.open()

        url = self._url(endpoint)
        self._logger.verbose("HTTP", f"{method} {url}")
        try:
            response = self._http.request(
                method,
                url,
                headers=headers,
                timeout=self.settings.timeout,
                allow_redirects=False,
                **kwargs,
            )
        except requests.exceptions.RequestException as err:
            raise NetworkError(f"Request failed: {err}") from err

        self._logger.verbose("HTTP", f"Response: {response.status_code} {response.reason}")
        return response

    def _json(
        self, response: requests.Response, what: str, *, log_body: bool = True
    ) -> Any:
        """Decode a JSON body, naming the step in the error."""
        try:
            data = response.json()
        except ValueError as err:
            raise ResponseError(
                f"Error extracting {what}: invalid JSON response "
                f"(HTTP {response.status_code}): {_body_excerpt(response)}"
            ) from err
        if log_body:
            self._logger.debug("HTTP", f"JSON response: {data!r}")
        return data

    # ------------------------------------------------------------------ #
    # Pipeline steps
    # ------------------------------------------------------------------ #

    def authenticate(self, username: str, password: str) -> str:
        """Exchange username and password for a bearer token.

        Both values are sent as given; the form encoding is left to requests.

        Returns:
            The access token, also stored on the session.

        Raises:
            NetworkError: If the request gets no response.
            ResponseError: If the body is not JSON or lacks a string
                ``access_token``.
        """
        response = self._request(
            "POST",
            TOKEN_ENDPOINT,
            {"Content-Type": "application/x-www-form-urlencoded"},
            data={
                "grant_type": "password",
                "username": username,
                "password": password,
            },
        )
        # The body carries the credential; keep it out of debug output.
        data = self._json(response, "token", log_body=False)

        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str):
            raise ResponseError(
                f"Error extracting token: no access_token in response "
                f"(HTTP {response.status_code}): {_body_excerpt(response)}"
            )

        self.token = token
        self._logger.verbose("AUTH", "Access token received")
        return token

    def resolve_home_folder(self) -> int:
        """Look up the authenticated user's home folder id.

        Raises:
            NetworkError: If the request gets no response.
            ResponseError: If the body lacks an integer ``homeFolderID``.
        """
        response = self._request(
            "GET",
            SELF_ENDPOINT,
            {
                "Content-Type": "application/json",
                "Authorization": self._bearer(),
            },
        )
        data = self._json(response, "home folder id")

        folder_id = data.get("homeFolderID") if isinstance(data, dict) else None
        # bool is an int subclass; a true/false id is still malformed.
        if not isinstance(folder_id, int) or isinstance(folder_id, bool):
            raise ResponseError(
                f"Error extracting home folder id: no integer homeFolderID in "
                f"response (HTTP {response.status_code}): {_body_excerpt(response)}"
            )

        self.home_folder_id = folder_id
        self._logger.verbose("FOLDER", f"Home folder id: {folder_id}")
        return folder_id

    def open_file(self, path: str | Path) -> FileTransfer:
        """Open the local file to upload and capture its name and size.

        Raises:
            FileAccessError: If the file cannot be opened.
        """
        transfer = FileTransfer.open(path, reporter=self._reporter, logger=self._logger)
        if self.transfer is not None:
            self.transfer.close()
        self.transfer = transfer
        self._logger.verbose(
            "FILE", f"Opened {path} as {transfer.name!r} ({transfer.total_size} bytes)"
        )
        return transfer

    def check_not_on_server(self) -> None:
        """Make sure the home folder has no file with the same name.

        Names are compared exactly (case-sensitive, no normalisation).

        Raises:
            NetworkError: If the request gets no response.
            ResponseError: If ``items`` is missing, not a list, or has an
                entry without a string ``name``.
            DuplicateFileError: If a file with the same name exists.
        """
        file_name = self.transfer.name
        # The API has always been sent this Content-Type on the listing GET.
        response = self._request(
            "GET",
            FOLDER_FILES_ENDPOINT.format(folder_id=self.home_folder_id),
            {
                "Content-Type": "multipart/form-data",
                "Authorization": self._bearer(),
            },
        )
        data = self._json(response, "folder listing")

        if not isinstance(data, dict) or "items" not in data:
            raise ResponseError(
                f"Error in file lookup on server: no items in response "
                f"(HTTP {response.status_code}): {_body_excerpt(response)}"
            )
        items = data["items"]
        if not isinstance(items, list):
            raise ResponseError(
                f"Error in file lookup on server: items is "
                f"{type(items).__name__}, expected a list"
            )

        for item in items:
            server_name = item.get("name") if isinstance(item, dict) else None
            if not isinstance(server_name, str):
                raise ResponseError(
                    f"Error in file lookup on server: item without a name: {item!r}"
                )
            if server_name == file_name:
                raise DuplicateFileError(
                    f"File {file_name!r} already exists on server. Upload failed.",
                    file_name,
                )

        self._logger.verbose(
            "FOLDER", f"{len(items)} file(s) in folder, no {file_name!r} among them"
        )

    def upload(self) -> UploadResult:
        """Stream the open file to the home folder as a multipart upload.

        Progress is written to stdout while requests pulls the body.

        Returns:
            A successful UploadResult.

        Raises:
            NetworkError: If the request gets no response.
            UploadRejectedError: If the status is outside 200-299.
        """
        transfer = self.transfer
        body = MultipartStream(UPLOAD_FIELD, transfer)

        self._reporter.start()
        response = self._request(
            "POST",
            FOLDER_FILES_ENDPOINT.format(folder_id=self.home_folder_id),
            {
                "Content-Type": body.content_type,
                "Authorization": self._bearer(),
            },
            data=body,
        )

        if response.status_code // 100 != 2:
            raise UploadRejectedError(
                f"Uploading file failed: HTTP {response.status_code}\n{response.text}",
                response.status_code,
                response.text,
            )

        self._logger.verbose(
            "UPLOAD", f"Sent {transfer.bytes_read} of {transfer.total_size} bytes"
        )
        return UploadResult(
            status="success",
            file_name=transfer.name,
            file_size=transfer.total_size,
            folder_id=self.home_folder_id,
            status_code=response.status_code,
        )
