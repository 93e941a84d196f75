"""SSH keypair for logging into the bootstrap instance."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

logger: logging.Logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9@._-]")


def _generate_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=4096)


class SshKey:
    """A named keypair persisted as an OpenSSH private key file.

    The key is generated on first use and reloaded from ``directory`` on
    every later run, so the same public key is uploaded for a given name.
    """

    def __init__(self, name: str, directory: Path) -> None:
        self.name: str = name
        self.path: Path = directory / _UNSAFE_FILENAME_CHARS.sub("_", name)
        self._private_key: PrivateKeyTypes = self._load_or_generate()

    def _load_or_generate(self) -> PrivateKeyTypes:
        if self.path.exists():
            logger.debug("ssh_key_loaded", extra={"path": str(self.path)})
            return serialization.load_ssh_private_key(self.path.read_bytes(), password=None)

        private_key = _generate_private_key()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.OpenSSH,
            encryption_algorithm=serialization.NoEncryption(),
        )
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(pem)
        logger.info("ssh_key_generated", extra={"path": str(self.path)})
        return private_key

    @property
    def public_key(self) -> str:
        """OpenSSH public key text, commented with the key name."""
        public = self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        )
        return f"{public.decode('ascii')} {self.name}"

    def __str__(self) -> str:
        return self.public_key
