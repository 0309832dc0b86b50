# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Cryptographic primitives for pseudonymization.

Design:
- Hashing: HMAC-SHA256 keyed with the context salt
- Encryption: AES-256-CBC with PKCS7 padding
- Container key: SHA-256 of the password

Known weaknesses kept for output compatibility with existing mapping files:
- One IV per context is reused for every encryption, so equal plaintexts give equal ciphertexts.
- The container key is an unsalted hash of the password, not a key derivation function.
"""

from __future__ import annotations

import hashlib
import hmac
import random
import secrets

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from gdpr_pseudo.exceptions import DecryptionError

# Constants
SALT_SIZE = 32  # HMAC key
KEY_SIZE = 32  # AES-256
IV_SIZE = 16  # AES block


def random_bytes(size: int, rng: random.Random | None = None) -> bytes:
    """Return random bytes, reproducible when a seeded generator is given."""
    if rng is None:
        return secrets.token_bytes(size)
    return rng.randbytes(size)


def hmac_sha256_hex(key: bytes, message: str) -> str:
    """Return the lowercase hex HMAC-SHA256 of a UTF-8 message."""
    return hmac.new(key, message.encode('utf-8'), hashlib.sha256).hexdigest()


def derive_password_key(password: str) -> bytes:
    """Derive a 32-byte container key from a password."""
    return hashlib.sha256(password.encode('utf-8')).digest()


def aes_cbc_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """Encrypt bytes with AES-CBC and PKCS7 padding."""
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt AES-CBC ciphertext and strip the PKCS7 padding.

    Raises:
        DecryptionError: If the ciphertext length or the padding is invalid.
    """
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as error:
        msg = f'Decryption failed: {error}'
        raise DecryptionError(msg) from error
