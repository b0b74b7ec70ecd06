# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

from inkling.provider.base import (
    FetchResult,
    SuggestionDisplay,
    SuggestionFetcher,
    SuggestionRequest,
)

__all__ = ["FetchResult", "SuggestionDisplay", "SuggestionFetcher", "SuggestionRequest"]
