# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""In-editor AI code-suggestion coordinator."""

from datetime import UTC, datetime


def now_iso() -> str:
    return datetime.now(UTC).isoformat()
