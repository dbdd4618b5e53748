"""Self-signed TLS material for local HTTPS serving.

Development use only: the certificate is not CA-issued and browsers must be
told to trust it once. Material on disk is reused while it stays valid for
longer than the renewal window and regenerated otherwise.
"""

import ipaddress
import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from propr.errors.exceptions import CertificateError
from propr.models.enums import CertificateState

logger = logging.getLogger(__name__)

KEY_SIZE = 2048
RENEW_BEFORE = timedelta(days=30)
VALIDITY = timedelta(days=365)


def should_regenerate(now: datetime, valid_to: datetime, renew_before: timedelta = RENEW_BEFORE) -> bool:
    """True when less than ``renew_before`` of validity remains at ``now``."""
    return valid_to <= now + renew_before


def assess_certificate(
    cert_path: Path,
    key_path: Path,
    now: datetime,
    renew_before: timedelta = RENEW_BEFORE,
) -> tuple[CertificateState, datetime | None]:
    """Classify the material on disk; returns the state and the expiry if known."""
    if not cert_path.exists() or not key_path.exists():
        return CertificateState.ABSENT, None
    try:
        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
        serialization.load_pem_private_key(key_path.read_bytes(), password=None)
    except (OSError, ValueError, TypeError) as exc:
        logger.debug("Certificate material unreadable: %s", exc)
        return CertificateState.INVALID, None

    valid_to = cert.not_valid_after_utc
    if should_regenerate(now, valid_to, renew_before):
        return CertificateState.EXPIRING, valid_to
    return CertificateState.VALID, valid_to


def generate_self_signed(
    now: datetime,
    validity: timedelta = VALIDITY,
    common_name: str = "localhost",
) -> tuple[bytes, bytes]:
    """Return (certificate PEM, private key PEM) for a fresh localhost certificate."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=KEY_SIZE)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=1))
        .not_valid_after(now + validity)
        .add_extension(
            x509.SubjectAlternativeName([
                x509.DNSName("localhost"),
                x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
            ]),
            critical=False,
        )
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return cert.public_bytes(serialization.Encoding.PEM), key_pem


def _write_private(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` readable and writable by the owner only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    os.chmod(path, 0o600)


class CertificateManager:
    """Loads or regenerates the certificate/key pair used by the HTTPS server."""

    def __init__(
        self,
        cert_path: Path,
        key_path: Path,
        renew_before: timedelta = RENEW_BEFORE,
        validity: timedelta = VALIDITY,
    ):
        self.cert_path = Path(cert_path)
        self.key_path = Path(key_path)
        self.renew_before = renew_before
        self.validity = validity

    def assess(self, now: datetime | None = None) -> tuple[CertificateState, datetime | None]:
        return assess_certificate(
            self.cert_path, self.key_path, now or datetime.now(timezone.utc), self.renew_before,
        )

    def ensure(self, now: datetime | None = None) -> tuple[Path, Path]:
        """Return usable (cert, key) paths, regenerating the pair if needed."""
        now = now or datetime.now(timezone.utc)
        state, valid_to = self.assess(now)

        if state == CertificateState.VALID:
            logger.info("Certificate valid until %s, reusing", valid_to.date().isoformat())
            return self.cert_path, self.key_path

        if state == CertificateState.EXPIRING:
            logger.info("Certificate expires %s, regenerating", valid_to.date().isoformat())
        elif state == CertificateState.INVALID:
            logger.warning("Certificate unreadable, regenerating")
        else:
            logger.info("No certificate found, generating")

        cert_pem, key_pem = generate_self_signed(now, self.validity)
        try:
            self.cert_path.parent.mkdir(parents=True, exist_ok=True)
            self.key_path.parent.mkdir(parents=True, exist_ok=True)
            _write_private(self.cert_path, cert_pem)
            _write_private(self.key_path, key_pem)
        except OSError as exc:
            raise CertificateError(f"Could not write certificate material: {exc}") from exc

        logger.info(
            "Generated new certificate (valid %d days) -> %s",
            self.validity.days, self.cert_path,
        )
        return self.cert_path, self.key_path

    @classmethod
    def from_settings(cls, settings) -> "CertificateManager":
        return cls(
            settings.cert_file,
            settings.key_file,
            renew_before=timedelta(days=settings.cert_renew_before_days),
            validity=timedelta(days=settings.cert_validity_days),
        )
