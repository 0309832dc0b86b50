# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Cryptographic material held by one pseudonymization engine."""

from __future__ import annotations

import base64
import binascii
import random
from dataclasses import dataclass, field

from gdpr_pseudo.crypto import IV_SIZE, KEY_SIZE, SALT_SIZE, random_bytes
from gdpr_pseudo.exceptions import InvalidInputError


@dataclass(frozen=True)
class PseudonymizationContext:
    """Salt, AES key and IV of one engine.

    The salt keys the HMAC used for hashing; the key and IV are used for AES-CBC
    encryption. Key material is left out of the repr.
    """

    salt: bytes = field(repr=False)
    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)

    def __post_init__(self) -> None:
        """Check the length of each part."""
        for name, expected in (('salt', SALT_SIZE), ('key', KEY_SIZE), ('iv', IV_SIZE)):
            value = getattr(self, name)

            if not isinstance(value, bytes) or len(value) != expected:
                msg = f'Context {name} must be {expected} bytes'
                raise InvalidInputError(msg)

    @classmethod
    def generate(cls, seed: int | None = None) -> PseudonymizationContext:
        """Create new material, reproducible for a given seed (testing only)."""
        rng = random.Random(seed) if seed is not None else None  # noqa: S311

        return cls(
            salt=random_bytes(SALT_SIZE, rng),
            key=random_bytes(KEY_SIZE, rng),
            iv=random_bytes(IV_SIZE, rng),
        )

    def to_dict(self) -> dict[str, str]:
        """Return the material as base64 strings."""
        return {
            'salt': base64.b64encode(self.salt).decode('ascii'),
            'key': base64.b64encode(self.key).decode('ascii'),
            'iv': base64.b64encode(self.iv).decode('ascii'),
        }

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> PseudonymizationContext:
        """Restore material from base64 strings produced by ``to_dict``."""
        try:
            return cls(
                salt=base64.b64decode(data['salt'], validate=True),
                key=base64.b64decode(data['key'], validate=True),
                iv=base64.b64decode(data['iv'], validate=True),
            )
        except (KeyError, TypeError, binascii.Error) as error:
            msg = f'Invalid context data: {error}'
            raise InvalidInputError(msg) from error
