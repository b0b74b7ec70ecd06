# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Exception taxonomy. Everything except SessionStateError is absorbed locally."""


class InklingError(Exception):
    """Base for all inkling errors."""


class ConfigurationUnavailable(InklingError):
    """A configuration read failed. Readers treat it as feature off."""


class PersistedWriteFailure(InklingError):
    """A persisted key/value write was rejected by the backend."""


class ExternalCollaboratorFailure(InklingError):
    """The fetcher or display surface failed."""


class SessionStateError(InklingError):
    """Raised on invalid state transition."""
