"""
TOTP secret generation and code verification.

Secrets are base32 encoded for authenticator apps; codes are six digits
on a 30 second step.
"""

import base64
import binascii
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

import pyotp
import qrcode

SECRET_LENGTH = 32  # base32 chars, 160 bits


class MalformedSecretError(ValueError):
    """Stored secret is not valid base32"""


@dataclass(frozen=True)
class GeneratedSecret:
    secret: str
    provisioning_uri: str


class SecretCodec:
    """
    Generates TOTP secrets and verifies submitted codes.

    Business Rules:
    - Secrets carry 160 bits of entropy
    - Provisioning URI binds the secret to the issuer and account label
    - Codes are accepted from the current step and `valid_window` steps
      either side to tolerate clock drift
    """

    def __init__(self, issuer: str, valid_window: int = 2):
        self.issuer = issuer
        self.valid_window = valid_window

    def generate_secret(self, label: str) -> GeneratedSecret:
        secret = pyotp.random_base32(length=SECRET_LENGTH)
        return GeneratedSecret(
            secret=secret, provisioning_uri=self.provisioning_uri(secret, label)
        )

    def provisioning_uri(self, secret: str, label: str) -> str:
        return pyotp.TOTP(secret).provisioning_uri(name=label, issuer_name=self.issuer)

    def render_qr_code(self, provisioning_uri: str) -> str:
        """QR code for the provisioning URI as a PNG data URI"""
        img = qrcode.make(provisioning_uri)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")

    def verify(
        self,
        code: str,
        secret: str,
        for_time: Optional[Union[int, datetime]] = None,
    ) -> bool:
        """
        Check a submitted code against the secret.

        Returns False for any wrong or badly shaped code; raises
        MalformedSecretError only when the secret itself cannot be decoded.
        """
        self._check_secret(secret)
        code = (code or "").strip()
        if len(code) != 6 or not code.isdigit():
            return False
        totp = pyotp.TOTP(secret)
        return bool(totp.verify(code, for_time=for_time, valid_window=self.valid_window))

    def _check_secret(self, secret: str) -> None:
        if not secret:
            raise MalformedSecretError("TOTP secret is empty")
        padded = secret.upper() + "=" * (-len(secret) % 8)
        try:
            base64.b32decode(padded, casefold=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedSecretError("TOTP secret is not valid base32") from exc
