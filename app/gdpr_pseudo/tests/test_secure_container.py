# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Tests for password-protected mapping containers."""

from __future__ import annotations

from pathlib import Path

import pytest

from gdpr_pseudo.context import PseudonymizationContext
from gdpr_pseudo.exceptions import (
    ContainerWriteError,
    DecryptionError,
    RestorationWarning,
    UnsupportedFormatError,
)
from gdpr_pseudo.mapping_store import MappingStore
from gdpr_pseudo.secure_container import VERSION, SecureContainerCodec, keys_path

PASSWORD = 'correct horse battery staple'


@pytest.fixture
def codec() -> SecureContainerCodec:
    return SecureContainerCodec()


@pytest.fixture
def context() -> PseudonymizationContext:
    return PseudonymizationContext.generate(21)


@pytest.fixture
def store() -> MappingStore:
    mapping_store = MappingStore()
    mapping_store.record('name', [('Jane Doe', 'ID_0001'), ('Äijä', 'ID_0002')])
    mapping_store.record('email', [('jane@example.com', 'H_0f3a')])
    return mapping_store


@pytest.fixture
def saved(
    codec: SecureContainerCodec,
    store: MappingStore,
    context: PseudonymizationContext,
    tmp_path: Path,
) -> Path:
    """Mapping file saved with the test password."""
    path = tmp_path / 'mappings.bin'
    codec.save(store, context, path, PASSWORD)
    return path


class TestSave:
    """Tests for writing containers."""

    def test_writes_both_files(self, saved: Path) -> None:
        """The mapping file and its key sidecar are written."""
        assert saved.is_file()
        assert keys_path(saved) == saved.with_name('mappings.bin.keys')
        assert keys_path(saved).is_file()

    def test_header(self, saved: Path, context: PseudonymizationContext) -> None:
        """Both files start with the version bytes and the context IV."""
        for path in (saved, keys_path(saved)):
            data = path.read_bytes()

            assert data[:2] == b'\x01\x00' == VERSION
            assert data[2:18] == context.iv
            assert (len(data) - 18) % 16 == 0

    def test_contents_are_encrypted(self, saved: Path) -> None:
        """Originals do not appear in the written bytes."""
        assert b'Jane Doe' not in saved.read_bytes()
        assert b'ID_0001' not in saved.read_bytes()

    def test_write_failure(
        self,
        codec: SecureContainerCodec,
        store: MappingStore,
        context: PseudonymizationContext,
        tmp_path: Path,
    ) -> None:
        """A path that cannot be written raises a ContainerWriteError."""
        with pytest.raises(ContainerWriteError):
            codec.save(store, context, tmp_path / 'missing' / 'mappings.bin', PASSWORD)

    def test_write_failure_is_an_os_error(
        self,
        codec: SecureContainerCodec,
        store: MappingStore,
        context: PseudonymizationContext,
        tmp_path: Path,
    ) -> None:
        """Write failures can be handled as OSError."""
        with pytest.raises(OSError, match='Cannot write container'):
            codec.save(store, context, tmp_path, PASSWORD)


class TestLoad:
    """Tests for reading containers."""

    def test_round_trip(
        self,
        codec: SecureContainerCodec,
        saved: Path,
        store: MappingStore,
        context: PseudonymizationContext,
    ) -> None:
        """Loading gives back the saved store and context."""
        loaded_store, loaded_context = codec.load(saved, PASSWORD)

        assert loaded_store == store
        assert loaded_context == context

    def test_accepts_string_path(self, codec: SecureContainerCodec, saved: Path, store: MappingStore) -> None:
        """Paths may be given as strings."""
        assert codec.load(str(saved), PASSWORD)[0] == store

    def test_wrong_password(self, codec: SecureContainerCodec, saved: Path) -> None:
        """A wrong password fails with a DecryptionError."""
        with pytest.raises(DecryptionError, match='password'):
            codec.load(saved, 'wrong')

    def test_missing_file(self, codec: SecureContainerCodec, tmp_path: Path) -> None:
        """A missing mapping file fails."""
        with pytest.raises(FileNotFoundError):
            codec.load(tmp_path / 'absent.bin', PASSWORD)

    def test_unsupported_version(self, codec: SecureContainerCodec, saved: Path) -> None:
        """Unknown version bytes are rejected."""
        saved.write_bytes(b'\x02\x00' + saved.read_bytes()[2:])

        with pytest.raises(UnsupportedFormatError, match='0200'):
            codec.load(saved, PASSWORD)

    @pytest.mark.parametrize('size', [0, 2, 10, 18])
    def test_truncated_file(self, codec: SecureContainerCodec, saved: Path, size: int) -> None:
        """Files without a full header and ciphertext are rejected."""
        saved.write_bytes(saved.read_bytes()[:size])

        with pytest.raises((DecryptionError, UnsupportedFormatError)):
            codec.load(saved, PASSWORD)

    def test_corrupted_ciphertext(self, codec: SecureContainerCodec, saved: Path) -> None:
        """Ciphertext that is not a whole number of blocks fails to decrypt."""
        saved.write_bytes(saved.read_bytes()[:-1])

        with pytest.raises(DecryptionError):
            codec.load(saved, PASSWORD)

    def test_missing_sidecar(self, codec: SecureContainerCodec, saved: Path, store: MappingStore) -> None:
        """Without a key sidecar the store loads and no context is returned."""
        keys_path(saved).unlink()

        with pytest.warns(RestorationWarning, match='Key file not found'):
            loaded_store, loaded_context = codec.load(saved, PASSWORD)

        assert loaded_store == store
        assert loaded_context is None

    def test_sidecar_unsupported_version(self, codec: SecureContainerCodec, saved: Path) -> None:
        """A sidecar with another version is skipped with a warning."""
        sidecar = keys_path(saved)
        sidecar.write_bytes(b'\x09\x09' + sidecar.read_bytes()[2:])

        with pytest.warns(RestorationWarning, match='Unsupported key file version'):
            _, loaded_context = codec.load(saved, PASSWORD)

        assert loaded_context is None

    def test_sidecar_wrong_password(
        self,
        codec: SecureContainerCodec,
        saved: Path,
        store: MappingStore,
        context: PseudonymizationContext,
    ) -> None:
        """A sidecar written with another password fails the whole load."""
        codec.save(store, context, Path(f'{saved}.other'), 'another password')
        keys_path(saved).write_bytes(keys_path(Path(f'{saved}.other')).read_bytes())

        with pytest.raises(DecryptionError, match='keys'):
            codec.load(saved, PASSWORD)

    def test_empty_store(
        self,
        codec: SecureContainerCodec,
        context: PseudonymizationContext,
        tmp_path: Path,
    ) -> None:
        """An empty store round-trips."""
        path = tmp_path / 'empty.bin'
        codec.save(MappingStore(), context, path, PASSWORD)

        assert len(codec.load(path, PASSWORD)[0]) == 0
