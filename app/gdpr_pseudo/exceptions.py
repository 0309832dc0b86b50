# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Exceptions and warnings raised by the pseudonymization core.

Errors abort the call that raised them. Warnings report conditions where
processing continues, such as a single value that cannot be decrypted or a
column that is missing from the table.
"""

from __future__ import annotations


class PseudonymizationError(Exception):
    """Base exception for pseudonymization errors."""


class InvalidInputError(PseudonymizationError, ValueError):
    """Input has the wrong shape, digit count or date format."""


class DecryptionError(PseudonymizationError):
    """Decryption failed (wrong password or corrupted data)."""


class UnsupportedFormatError(PseudonymizationError):
    """Container carries a version tag that is not supported."""


class ContainerWriteError(PseudonymizationError, OSError):
    """Container file could not be written."""


class MappingStorageDisabledError(PseudonymizationError):
    """Mappings are requested but the engine does not store them."""


class PseudonymizationWarning(UserWarning):
    """Base warning for non-fatal pseudonymization problems."""


class DecryptionWarning(PseudonymizationWarning):
    """A single value could not be decrypted and was replaced by a missing value."""


class MissingColumnWarning(PseudonymizationWarning):
    """A column named in the directive is not present in the table."""


class UnknownMethodWarning(PseudonymizationWarning):
    """A column directive names an unknown pseudonymization method."""


class RestorationWarning(PseudonymizationWarning):
    """Previously saved keys or mappings could not be restored."""
