# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""GDPR pseudonymization package.

This package provides core functionality for pseudonymizing tabular data.
The main modules include the pseudonymization engine, its mapping store, the
password-protected container format for keys and mappings, and the Finnish
personal identity code (PID) checksum utilities.
"""

from gdpr_pseudo.context import PseudonymizationContext
from gdpr_pseudo.exceptions import (
    ContainerWriteError,
    DecryptionError,
    InvalidInputError,
    MappingStorageDisabledError,
    PseudonymizationError,
    UnsupportedFormatError,
)
from gdpr_pseudo.mapping_store import MappingEntry, MappingStore
from gdpr_pseudo.pid import PidRecord, compute_control_char, generate_pid, parse_pid, validate_pid
from gdpr_pseudo.pseudonymizer import Pseudonymizer
from gdpr_pseudo.secure_container import SecureContainerCodec

__all__ = [
    'ContainerWriteError',
    'DecryptionError',
    'InvalidInputError',
    'MappingEntry',
    'MappingStorageDisabledError',
    'MappingStore',
    'PidRecord',
    'PseudonymizationContext',
    'PseudonymizationError',
    'Pseudonymizer',
    'SecureContainerCodec',
    'UnsupportedFormatError',
    'compute_control_char',
    'generate_pid',
    'parse_pid',
    'validate_pid',
]
