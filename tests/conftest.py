from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from reseeder.common.models import ReseedOptions
from reseeder.server.credentials import CredentialStore

TEST_KEY_SIZE = 2048


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so relative defaults land in it."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def netdb_dir(workdir: Path) -> Path:
    netdb = workdir / "netDb"
    netdb.mkdir()
    return netdb


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore(signing_key_size=TEST_KEY_SIZE)


@pytest.fixture
def options(netdb_dir: Path) -> ReseedOptions:
    return ReseedOptions(netdb=str(netdb_dir), signer="tester@mail.i2p")


@pytest.fixture
def signing_key_pem() -> bytes:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=TEST_KEY_SIZE)
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def written_files(workdir: Path):
    """Return a callable listing every file under the working directory."""

    def _list() -> set[str]:
        return {str(p.relative_to(workdir)) for p in workdir.rglob("*") if p.is_file()}

    return _list
