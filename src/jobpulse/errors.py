
# Copyright 2026 Justin Cook
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

"""
Errors surfaced to the user. Each carries a message fit for display.
"""


class JobPulseError(Exception):
    """Base class for user-visible failures."""


class ProfileImportError(JobPulseError):
    """The imported profile file could not be used. The store is unchanged."""


class GenerationError(JobPulseError):
    """The generation service failed or returned an unusable response."""


class ScrapeError(JobPulseError):
    """The scraping helper could not extract the job offer."""

    def __init__(self, message: str, diagnostic: str = ""):
        super().__init__(message)
        self.diagnostic = diagnostic
