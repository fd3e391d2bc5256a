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

"""Settings loading for moveitup.

Settings are layered: built-in defaults, an optional YAML settings file,
MOVEIT_* environment variables (with .env support), then explicit
overrides. The last layer that sets a key wins.

Public API:

- load_settings: Build the effective Settings for a run
- Settings: Frozen settings dataclass
- DEFAULT_BASE_URL: The MOVEit cloud endpoint used when nothing overrides it

Example:
    Basic usage:

        from pathlib import Path
        from moveitup.config import load_settings

        settings = load_settings(Path("moveitup.yaml"))
        print(settings.base_url)

"""

from .loader import DEFAULT_BASE_URL, Settings, load_settings

__all__ = ["DEFAULT_BASE_URL", "Settings", "load_settings"]
