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

"""Core orchestration for moveitup.

upload_file() runs the whole upload as a strict pipeline. Each step needs
the previous step's output, so the first failure ends the run:

1. Authenticate (username/password -> bearer token)
2. Resolve the user's home folder id
3. Open the local file (name and size)
4. List the home folder; stop if a file with the same name exists
5. Stream the file as a multipart upload and check the status

This is the boundary between the raising library code and its callers:
moveitup exceptions are reported through the logger's error() and turned
into a failed UploadResult. Nothing is retried.

Example:
    Programmatic usage:
        ```python
        from moveitup.config import load_settings
        from moveitup.core import upload_file
        from moveitup.logging import get_logger

        result = upload_file(
            "alice",
            "secret",
            "reports/q1.pdf",
            settings=load_settings(),
            logger=get_logger(verbose=True),
        )
        print(result.status)
        ```

"""

from __future__ import annotations

from pathlib import Path

from moveitup.config import Settings
from moveitup.exceptions import UploaderError
from moveitup.io import ProgressReporter
from moveitup.logging import Logger, get_global_logger
from moveitup.results import UploadResult
from moveitup.session import UploadSession

TOTAL_STEPS = 5


def upload_file(
    username: str,
    password: str,
    file_path: str | Path,
    *,
    settings: Settings | None = None,
    logger: Logger | None = None,
    reporter: ProgressReporter | None = None,
) -> UploadResult:
    """Upload one file to the authenticated user's home folder.

    Args:
        username: Account name, sent verbatim.
        password: Account password, sent verbatim.
        file_path: Local file to upload. Its weakly canonicalised basename
            is the name used on the server.
        settings: Base URL, timeout and User-Agent. Defaults to Settings().
        logger: Where step lines and errors go. Defaults to the global logger.
        reporter: Where upload progress goes. Defaults to stdout.

    Returns:
        UploadResult with status "success", or "failed" plus the failing
        step's message in ``error``. The HTTP client and the file are closed
        in both cases.

    """
    logger = logger or get_global_logger()
    settings = settings or Settings()

    session = UploadSession(settings, logger=logger, reporter=reporter)
    try:
        with session:
            logger.step(1, TOTAL_STEPS, "Authenticating...")
            session.authenticate(username, password)

            logger.step(2, TOTAL_STEPS, "Resolving home folder...")
            session.resolve_home_folder()

            logger.step(3, TOTAL_STEPS, "Opening file...")
            session.open_file(file_path)

            logger.step(4, TOTAL_STEPS, "Checking folder for existing file...")
            session.check_not_on_server()

            logger.step(5, TOTAL_STEPS, "Uploading file...")
            return session.upload()
    except UploaderError as err:
        logger.error(str(err))
        transfer = session.transfer
        return UploadResult(
            status="failed",
            file_name=transfer.name if transfer else None,
            file_size=transfer.total_size if transfer else None,
            folder_id=session.home_folder_id or None,
            status_code=getattr(err, "status_code", None),
            error=str(err),
        )
