# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Tests for the pseudonymization context and crypto primitives."""

from __future__ import annotations

import dataclasses
import hashlib
import hmac

import pytest

from gdpr_pseudo.context import PseudonymizationContext
from gdpr_pseudo.crypto import (
    aes_cbc_decrypt,
    aes_cbc_encrypt,
    derive_password_key,
    hmac_sha256_hex,
)
from gdpr_pseudo.exceptions import DecryptionError, InvalidInputError

KEY = bytes(range(32))
IV = bytes(range(16))

# -------------------------------- CONTEXT TESTS ---------------------------------- #


class TestPseudonymizationContext:
    """Tests for context generation and serialization."""

    def test_generated_sizes(self) -> None:
        """Salt and key are 32 bytes, the IV 16 bytes."""
        context = PseudonymizationContext.generate()

        assert len(context.salt) == 32
        assert len(context.key) == 32
        assert len(context.iv) == 16

    def test_seed_is_reproducible(self) -> None:
        """The same seed gives the same material."""
        assert PseudonymizationContext.generate(42) == PseudonymizationContext.generate(42)

    def test_unseeded_contexts_differ(self) -> None:
        """Without a seed every context is new."""
        assert PseudonymizationContext.generate() != PseudonymizationContext.generate()

    def test_different_seeds_differ(self) -> None:
        """Different seeds give different material."""
        assert PseudonymizationContext.generate(1).salt != PseudonymizationContext.generate(2).salt

    def test_is_immutable(self) -> None:
        """Material cannot be replaced after creation."""
        context = PseudonymizationContext.generate(1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            context.key = bytes(32)

    def test_repr_hides_material(self) -> None:
        """Key material is not shown in the repr."""
        context = PseudonymizationContext.generate(1)

        assert context.key.hex() not in repr(context)
        assert 'salt' not in repr(context)

    @pytest.mark.parametrize(
        ('salt', 'key', 'iv'),
        [
            (bytes(31), bytes(32), bytes(16)),
            (bytes(32), bytes(16), bytes(16)),
            (bytes(32), bytes(32), bytes(32)),
            ('x' * 32, bytes(32), bytes(16)),
        ],
    )
    def test_rejects_wrong_sizes(self, salt: bytes, key: bytes, iv: bytes) -> None:
        """Each part must have its exact size."""
        with pytest.raises(InvalidInputError):
            PseudonymizationContext(salt=salt, key=key, iv=iv)

    def test_dict_round_trip(self) -> None:
        """Material survives conversion to base64 strings."""
        context = PseudonymizationContext.generate(7)
        assert PseudonymizationContext.from_dict(context.to_dict()) == context

    @pytest.mark.parametrize('data', [{}, {'salt': '!!', 'key': '', 'iv': ''}, ['salt']])
    def test_from_dict_rejects_invalid(self, data: object) -> None:
        """Incomplete or corrupted data fails."""
        with pytest.raises(InvalidInputError):
            PseudonymizationContext.from_dict(data)


# --------------------------------- CRYPTO TESTS ---------------------------------- #


class TestCrypto:
    """Tests for the crypto primitives."""

    def test_hmac_matches_stdlib(self) -> None:
        """HMAC output equals the standard construction."""
        expected = hmac.new(KEY, 'Jane Doe'.encode(), hashlib.sha256).hexdigest()
        assert hmac_sha256_hex(KEY, 'Jane Doe') == expected

    def test_password_key_is_sha256(self) -> None:
        """The container key is the SHA-256 digest of the password."""
        assert derive_password_key('secret') == hashlib.sha256(b'secret').digest()

    @pytest.mark.parametrize('plaintext', [b'', b'a', b'x' * 16, 'Äijä Öljy'.encode()])
    def test_aes_round_trip(self, plaintext: bytes) -> None:
        """Encrypted data decrypts to the original, padded to whole blocks."""
        ciphertext = aes_cbc_encrypt(plaintext, KEY, IV)

        assert len(ciphertext) % 16 == 0
        assert len(ciphertext) > len(plaintext)
        assert aes_cbc_decrypt(ciphertext, KEY, IV) == plaintext

    def test_same_iv_gives_same_ciphertext(self) -> None:
        """Equal plaintexts encrypt identically under one key and IV."""
        assert aes_cbc_encrypt(b'value', KEY, IV) == aes_cbc_encrypt(b'value', KEY, IV)

    def test_decrypt_rejects_partial_block(self) -> None:
        """Ciphertext must be a whole number of blocks."""
        with pytest.raises(DecryptionError):
            aes_cbc_decrypt(b'short', KEY, IV)

    def test_decrypt_rejects_wrong_key(self) -> None:
        """A wrong key fails on the padding check or yields different bytes."""
        ciphertext = aes_cbc_encrypt(b'sensitive value', KEY, IV)

        try:
            result = aes_cbc_decrypt(ciphertext, bytes(32), IV)
        except DecryptionError:
            return

        assert result != b'sensitive value'
