"""
moveitup - MOVEit cloud file uploader

A small CLI tool and library that uploads a file to the home folder of a
MOVEit cloud account.

moveitup provides:
  - Password-grant authentication against the MOVEit REST API
  - Home folder lookup for the authenticated user
  - Duplicate check against the folder listing before uploading
  - Streamed multipart upload with whole-percent progress
  - Layered settings (YAML file, MOVEIT_* environment, .env)

Quick Start
-----------
Upload a file:

    $ moveitup -u alice -p secret -f report.pdf

For full CLI documentation:

    $ moveitup --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    The upload pipeline (upload_file).
session : module
    UploadSession: HTTP client and the individual API steps.
config : package
    Settings loading and merging.
io : package
    Streamed multipart body and progress reporting.

Public API
----------
    from moveitup.core import upload_file
    from moveitup.session import UploadSession
    from moveitup.config import load_settings

Project Information
-------------------
License: Apache-2.0
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Upload files to a MOVEit cloud home folder"

# Re-export commonly used names for convenience
from moveitup.config import Settings, load_settings
from moveitup.core import upload_file
from moveitup.exceptions import (
    ConfigError,
    DuplicateFileError,
    FileAccessError,
    NetworkError,
    ResponseError,
    UploaderError,
    UploadRejectedError,
)
from moveitup.results import UploadResult
from moveitup.session import UploadSession

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "Settings",
    "load_settings",
    "upload_file",
    "UploadSession",
    "UploadResult",
    "UploaderError",
    "ConfigError",
    "NetworkError",
    "ResponseError",
    "FileAccessError",
    "DuplicateFileError",
    "UploadRejectedError",
]
