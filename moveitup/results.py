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

"""Public API return types for moveitup.

The dataclass is frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using the result type:
        ```python
        from moveitup.core import upload_file

        result = upload_file("alice", "secret", "report.pdf")
        if result.ok:
            print(f"Uploaded {result.file_name} to folder {result.folder_id}")
        else:
            print(result.error)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadResult:
    """Result of one upload workflow run.

    Attributes:
        status: "success" or "failed".
        file_name: Name the file was (or would have been) uploaded under.
            None if the run failed before the file was opened.
        file_size: Size of the local file in bytes, if known.
        folder_id: Home folder id, if it was resolved.
        status_code: HTTP status of the upload request, if one was received.
        error: Message of the step that failed, None on success.
    """

    status: str
    file_name: str | None = None
    file_size: int | None = None
    folder_id: int | None = None
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"
