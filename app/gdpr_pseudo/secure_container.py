# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Password-protected containers for mappings and key material.

Wire format (mapping file and its ``.keys`` sidecar):
    [version (2 bytes)] [iv (16 bytes)] [ciphertext]

Where:
- version: 0x01 0x00, the only supported value
- iv: IV used for AES-CBC encryption of the payload
- ciphertext: JSON payload encrypted with AES-256-CBC, key = SHA-256(password)

The mapping file holds the MappingStore; the sidecar at ``<path>.keys`` holds the
salt, key and IV of the engine context.
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import TYPE_CHECKING

from gdpr_pseudo.context import PseudonymizationContext
from gdpr_pseudo.crypto import IV_SIZE, aes_cbc_decrypt, aes_cbc_encrypt, derive_password_key
from gdpr_pseudo.exceptions import (
    ContainerWriteError,
    DecryptionError,
    InvalidInputError,
    RestorationWarning,
    UnsupportedFormatError,
)
from gdpr_pseudo.mapping_store import MappingStore
from gdpr_pseudo.utils.logger import get_logger

if TYPE_CHECKING:
    import logging

VERSION = b'\x01\x00'
KEYS_SUFFIX = '.keys'
HEADER_SIZE = len(VERSION) + IV_SIZE


def keys_path(path: str | Path) -> Path:
    """Return the sidecar path holding the key material for a mapping file."""
    return Path(f'{path}{KEYS_SUFFIX}')


class SecureContainerCodec:
    """Save and load mapping stores and key material as encrypted containers."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the codec with a logger for information messages."""
        self.logger = get_logger(logger)

    def _write_container(self, path: Path, payload: dict, password_key: bytes, iv: bytes) -> None:
        """Encrypt a JSON payload and write it as a container."""
        plaintext = json.dumps(payload, ensure_ascii=False).encode('utf-8')
        ciphertext = aes_cbc_encrypt(plaintext, password_key, iv)

        try:
            with path.open('wb') as file:
                file.write(VERSION)
                file.write(iv)
                file.write(ciphertext)
        except OSError as error:
            self.logger.exception('Cannot write container to "%s"', path)
            msg = f'Cannot write container to "{path}": {error}'
            raise ContainerWriteError(msg) from error

    def _read_container(self, path: Path) -> tuple[bytes, bytes]:
        """Read a container and return its IV and ciphertext."""
        with path.open('rb') as file:
            version = file.read(len(VERSION))
            iv = file.read(IV_SIZE)
            ciphertext = file.read()

        if version != VERSION:
            msg = f'Unsupported container version in "{path}": {version.hex() or "empty"}'
            raise UnsupportedFormatError(msg)

        if len(iv) != IV_SIZE or not ciphertext:
            msg = f'Container "{path}" is truncated'
            raise DecryptionError(msg)

        return iv, ciphertext

    def _decrypt_payload(self, ciphertext: bytes, password_key: bytes, iv: bytes) -> object:
        """Decrypt and parse a JSON payload."""
        plaintext = aes_cbc_decrypt(ciphertext, password_key, iv)

        try:
            return json.loads(plaintext.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as error:
            msg = 'Failed to decrypt container. Is the password correct?'
            raise DecryptionError(msg) from error

    def save(
        self,
        store: MappingStore,
        context: PseudonymizationContext,
        path: str | Path,
        password: str,
    ) -> bool:
        """Write the mapping store to ``path`` and the key material to ``path.keys``.

        Raises:
            ContainerWriteError: If either file cannot be written.
        """
        path = Path(path)
        password_key = derive_password_key(password)

        self._write_container(path, store.to_dict(), password_key, context.iv)
        self._write_container(keys_path(path), context.to_dict(), password_key, context.iv)

        self.logger.info('Saved mappings for %d fields to "%s"', len(store), path)
        return True

    def load(self, path: str | Path, password: str) -> tuple[MappingStore, PseudonymizationContext | None]:
        """Read the mapping store and, when the sidecar exists, the key material.

        Returns:
            The mapping store and the restored context, or None when the sidecar is
            missing or has an unsupported version.

        Raises:
            FileNotFoundError: If the mapping file does not exist.
            UnsupportedFormatError: If the mapping file has an unsupported version.
            DecryptionError: If either container cannot be decrypted.
        """
        path = Path(path)
        if not path.is_file():
            msg = f'Mapping file does not exist: {path}'
            raise FileNotFoundError(msg)

        password_key = derive_password_key(password)

        iv, ciphertext = self._read_container(path)
        try:
            store = MappingStore.from_dict(self._decrypt_payload(ciphertext, password_key, iv))
        except (DecryptionError, InvalidInputError) as error:
            msg = 'Failed to decrypt mappings. Is the password correct?'
            raise DecryptionError(msg) from error

        return store, self._load_context(keys_path(path), password_key)

    def _load_context(self, path: Path, password_key: bytes) -> PseudonymizationContext | None:
        """Read the key material sidecar, if present and supported."""
        if not path.is_file():
            message = f'Key file not found, keeping current keys: {path}'
            self.logger.warning(message)
            warnings.warn(message, RestorationWarning, stacklevel=3)
            return None

        try:
            iv, ciphertext = self._read_container(path)
        except UnsupportedFormatError:
            message = 'Unsupported key file version, not loading keys'
            self.logger.warning(message)
            warnings.warn(message, RestorationWarning, stacklevel=3)
            return None

        try:
            return PseudonymizationContext.from_dict(self._decrypt_payload(ciphertext, password_key, iv))
        except (DecryptionError, InvalidInputError) as error:
            msg = 'Failed to decrypt keys. Is the password correct?'
            raise DecryptionError(msg) from error
