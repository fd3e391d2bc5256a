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

"""Exception hierarchy for moveitup.

Every failure in the upload pipeline is terminal for the run, so each step
raises one of these and the workflow boundary (core.upload_file) turns it
into a diagnostic line and a failed result:

- ConfigError: Settings file or environment problems
- NetworkError: Transport failures (connection, TLS, DNS, timeouts)
- ResponseError: Malformed or unexpected JSON from the API
- FileAccessError: The local file cannot be opened or sized
- DuplicateFileError: A file with the same name is already in the folder
- UploadRejectedError: The upload request got a non-2xx status

All exceptions inherit from UploaderError.

Example:
    Catching specific error types:
        ```python
        from moveitup.exceptions import DuplicateFileError, NetworkError

        try:
            session.check_not_on_server()
        except DuplicateFileError as e:
            print(f"Skipping: {e}")
        except NetworkError as e:
            print(f"Network error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "UploaderError",
    "ConfigError",
    "NetworkError",
    "ResponseError",
    "FileAccessError",
    "DuplicateFileError",
    "UploadRejectedError",
]


class UploaderError(Exception):
    """Base exception for all moveitup errors."""

    pass


class ConfigError(UploaderError):
    """Raised for settings problems.

    - YAML parsing errors or a document that is not a mapping
    - Unknown or mistyped settings keys
    - Invalid values in MOVEIT_* environment variables
    """

    pass


class NetworkError(UploaderError):
    """Raised when a request gets no HTTP response at all.

    The message carries the transport's own error text.
    """

    pass


class ResponseError(UploaderError):
    """Raised when an API response body is not the JSON we expect.

    Covers invalid JSON as well as missing or mistyped fields
    (access_token, homeFolderID, items[].name).
    """

    pass


class FileAccessError(UploaderError):
    """Raised when the file to upload cannot be opened for reading."""

    pass


class DuplicateFileError(UploaderError):
    """Raised when the home folder already contains a file with the same name.

    Attributes:
        file_name: The name that collided.
    """

    def __init__(self, message: str, file_name: str) -> None:
        super().__init__(message)
        self.file_name = file_name


class UploadRejectedError(UploaderError):
    """Raised when the server answers the upload with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the upload response.
        body: Full response body, kept for diagnostics.

    Example:
        Inspecting a rejected upload:
            ```python
            try:
                session.upload()
            except UploadRejectedError as e:
                print(e.status_code)
                print(e.body)
            ```
    """

    def __init__(self, message: str, status_code: int, body: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
