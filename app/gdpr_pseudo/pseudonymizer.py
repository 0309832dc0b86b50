# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Pseudonymization engine for tabular data.

This module provides the Pseudonymizer, which replaces sensitive values by:
    - hash: keyed HMAC-SHA256 digests, consistent across datasets processed with the same salt
    - encrypt / decrypt: reversible AES-CBC encryption
    - randomize_ids: sequential IDs per distinct value, or random unique tokens
    - transform_table: any of the above per column of a Polars DataFrame

Original to pseudonym pairs are recorded in a MappingStore when mapping storage is
enabled, and can be persisted with a password.
"""

from __future__ import annotations

import base64
import binascii
import math
import uuid
import warnings
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Callable

import polars as pl

from gdpr_pseudo.context import PseudonymizationContext
from gdpr_pseudo.crypto import aes_cbc_decrypt, aes_cbc_encrypt, hmac_sha256_hex
from gdpr_pseudo.exceptions import (
    DecryptionError,
    DecryptionWarning,
    InvalidInputError,
    MappingStorageDisabledError,
    MissingColumnWarning,
    PseudonymizationError,
    RestorationWarning,
    UnknownMethodWarning,
)
from gdpr_pseudo.mapping_store import MappingStore
from gdpr_pseudo.secure_container import SecureContainerCodec
from gdpr_pseudo.utils.logger import get_logger

if TYPE_CHECKING:
    import logging

Values = pl.Series | Sequence  # Type alias
METHODS = ('hash', 'encrypt', 'randomize')


def _is_missing(value: object) -> bool:
    """Check for None and NaN."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def _as_list(values: Values) -> list:
    """Return the values as a list, rejecting anything that is not a sequence."""
    if isinstance(values, pl.Series):
        return values.to_list()

    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        msg = f'Data must be a sequence or a Polars Series, got {type(values).__name__}'
        raise InvalidInputError(msg)

    return list(values)


def _as_output(values: Values, result: list[str | None]) -> pl.Series | list[str | None]:
    """Return a Series for Series input and a list otherwise."""
    if isinstance(values, pl.Series):
        return pl.Series(values.name, result, dtype=pl.String)
    return result


class Pseudonymizer:
    """Pseudonymizes values with hashing, encryption and randomized IDs.

    Example:
        >>> pseudonymizer = Pseudonymizer(store_mappings=True)
        >>> df = pseudonymizer.transform_table(df, {'name': 'hash', 'email': 'encrypt'})
        >>> pseudonymizer.save_mappings('mappings.bin', 'secret')
    """

    def __init__(
        self,
        seed: int | None = None,
        store_mappings: bool = False,  # noqa: FBT001, FBT002
        key_file: str | Path | None = None,
        key_password: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the engine with new key material or restore it from a key file.

        Args:
            seed: Seed for reproducible key material. Only intended for testing.
            store_mappings: Record original to pseudonym pairs.
            key_file: Mapping container from an earlier session to restore.
            key_password: Password of the key file.
            logger: Logger for information messages.
        """
        self.logger = get_logger(logger)
        self._context = PseudonymizationContext.generate(seed)
        self._store_mappings = store_mappings
        self._mappings = MappingStore()
        self._codec = SecureContainerCodec(logger=self.logger)

        if key_file is not None and key_password is not None and Path(key_file).is_file():
            try:
                self.load_mappings(key_file, key_password)
            except (PseudonymizationError, OSError) as error:
                message = f'Failed to load keys: {error}'
                self.logger.error(message)  # noqa: TRY400
                warnings.warn(message, RestorationWarning, stacklevel=2)

    @property
    def context(self) -> PseudonymizationContext:
        """Key material in use."""
        return self._context

    @property
    def mappings(self) -> MappingStore:
        """Recorded original to pseudonym pairs."""
        return self._mappings

    @property
    def store_mappings(self) -> bool:
        """Whether transforms record their mappings."""
        return self._store_mappings

    def _record(self, field_name: str, pairs: list[tuple[str, str]]) -> None:
        """Record pairs when mapping storage is enabled."""
        if not self._store_mappings:
            return

        added = self._mappings.record(field_name, pairs)
        self.logger.debug('Recorded %d new mappings for field "%s"', added, field_name)

    def _check_field_name(self, field_name: str) -> None:
        if not isinstance(field_name, str) or not field_name:
            msg = 'Field name must be a non-empty string'
            raise InvalidInputError(msg)

    def _pseudonymize(
        self,
        values: Values,
        field_name: str,
        transform: Callable[[str], str],
    ) -> pl.Series | list[str | None]:
        """Apply a transform to every non-missing value and record the pairs."""
        data = _as_list(values)
        self._check_field_name(field_name)

        result: list[str | None] = []
        pairs: list[tuple[str, str]] = []

        for value in data:
            if _is_missing(value):
                result.append(None)
                continue

            original = str(value)
            pseudonym = transform(original)
            result.append(pseudonym)
            pairs.append((original, pseudonym))

        self._record(field_name, pairs)
        return _as_output(values, result)

    def hash(self, values: Values, field_name: str, prefix: str = 'H_') -> pl.Series | list[str | None]:
        """Replace values with a prefixed HMAC-SHA256 hex digest keyed by the context salt."""
        salt = self._context.salt
        return self._pseudonymize(values, field_name, lambda value: f'{prefix}{hmac_sha256_hex(salt, value)}')

    def encrypt(self, values: Values, field_name: str, prefix: str = 'E_') -> pl.Series | list[str | None]:
        """Replace values with prefixed base64 AES-CBC ciphertext."""
        key, iv = self._context.key, self._context.iv

        def _encrypt(value: str) -> str:
            ciphertext = aes_cbc_encrypt(value.encode('utf-8'), key, iv)
            return prefix + base64.b64encode(ciphertext).decode('ascii')

        return self._pseudonymize(values, field_name, _encrypt)

    def decrypt(self, values: Values, prefix: str = 'E_') -> pl.Series | list[str | None]:
        """Decrypt values produced by ``encrypt``.

        Values that cannot be decrypted become missing and a DecryptionWarning is
        emitted for each of them; the remaining values are still processed.
        """
        data = _as_list(values)
        result: list[str | None] = []
        failures = 0

        for value in data:
            if _is_missing(value):
                result.append(None)
                continue

            encoded = str(value)
            if prefix and encoded.startswith(prefix):
                encoded = encoded[len(prefix):]

            try:
                ciphertext = base64.b64decode(encoded, validate=True)
                plaintext = aes_cbc_decrypt(ciphertext, self._context.key, self._context.iv)
                result.append(plaintext.decode('utf-8'))
            except (binascii.Error, DecryptionError, UnicodeDecodeError):
                failures += 1
                result.append(None)
                warnings.warn(f'Failed to decrypt value: {value}', DecryptionWarning, stacklevel=2)

        if failures:
            self.logger.warning('Failed to decrypt %d of %d values', failures, len(data))

        return _as_output(values, result)

    def randomize_ids(
        self,
        values: Values,
        field_name: str,
        prefix: str = 'ID_',
        consistent: bool = True,  # noqa: FBT001, FBT002
    ) -> pl.Series | list[str | None]:
        """Replace values with randomized IDs.

        In consistent mode the distinct values of this call are numbered in order of
        first appearance (``ID_0001``, ``ID_0002``, ...), so equal values share an ID.
        Otherwise every value gets its own random token and nothing is recorded.
        """
        data = _as_list(values)
        self._check_field_name(field_name)

        if not consistent:
            result = [None if _is_missing(value) else f'{prefix}{uuid.uuid4()}' for value in data]
            return _as_output(values, result)

        id_map: dict[str, str] = {}
        for value in data:
            if _is_missing(value):
                continue

            original = str(value)
            if original not in id_map:
                id_map[original] = f'{prefix}{len(id_map) + 1:04d}'

        result = [None if _is_missing(value) else id_map[str(value)] for value in data]

        self._record(field_name, list(id_map.items()))
        return _as_output(values, result)

    def transform_table(self, table: pl.DataFrame, columns: Mapping[str, str]) -> pl.DataFrame:
        """Pseudonymize the given columns of a DataFrame.

        Args:
            table: Input data, left unchanged.
            columns: Column name to method, one of 'hash', 'encrypt' or 'randomize'.

        Returns:
            A copy of the table with the named columns replaced. Missing columns and
            unknown methods are reported as warnings and skipped.
        """
        if not isinstance(table, pl.DataFrame):
            msg = 'Input must be a Polars DataFrame'
            raise InvalidInputError(msg)

        if not isinstance(columns, Mapping):
            msg = 'Columns must be a mapping of column name to method'
            raise InvalidInputError(msg)

        methods: dict[str, Callable[[pl.Series, str], pl.Series]] = {
            'hash': self.hash,
            'encrypt': self.encrypt,
            'randomize': self.randomize_ids,
        }

        result = table.clone()

        for column_name, method in columns.items():
            if column_name not in table.columns:
                message = f'Column not found in data frame: {column_name}'
                self.logger.warning(message)
                warnings.warn(message, MissingColumnWarning, stacklevel=2)
                continue

            transform = methods.get(method) if isinstance(method, str) else None
            if transform is None:
                message = f'Unknown pseudonymization method: {method}'
                self.logger.warning(message)
                warnings.warn(message, UnknownMethodWarning, stacklevel=2)
                continue

            self.logger.info('Applying %s to column "%s"', method, column_name)
            result = result.with_columns(transform(table.get_column(column_name), column_name))

        return result

    def save_mappings(self, file_path: str | Path, password: str) -> bool:
        """Save the mappings and key material, encrypted with a password."""
        if not self._store_mappings:
            msg = 'No mappings are being stored. Initialize with store_mappings=True.'
            raise MappingStorageDisabledError(msg)

        return self._codec.save(self._mappings, self._context, file_path, password)

    def load_mappings(self, file_path: str | Path, password: str) -> bool:
        """Load mappings and, when the key file is present, the key material.

        State is replaced only after the whole load succeeded.
        """
        mappings, context = self._codec.load(file_path, password)

        self._mappings = mappings
        if context is not None:
            self._context = context

        self.logger.info('Restored mappings for %d fields from "%s"', len(mappings), file_path)
        return True
