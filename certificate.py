"""
Certificado digital A1 (.pfx) usado na assinatura e no transporte.
"""

import base64
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from cryptography.hazmat.primitives.serialization import pkcs12, Encoding

from .exceptions import SigningError


class Certificate:
    """
    Carrega chave privada e certificado de um arquivo PKCS#12.

    Args:
        pfx_data: Conteúdo binário do .pfx
        pfx_password: Senha do certificado
        logger: Logger opcional para registro de eventos
    """

    def __init__(self, pfx_data: bytes, pfx_password: Optional[str] = None, logger=None):
        self.pfx_data = pfx_data
        self.pfx_password = pfx_password or ""
        try:
            private_key, certificate, additional_certs = pkcs12.load_key_and_certificates(
                pfx_data, pfx_password.encode() if pfx_password else None
            )
        except (ValueError, TypeError) as e:
            error_msg = "PFX inválido ou senha incorreta: %s" % e
            if logger:
                logger.error('[NFSe Equiplano] %s' % error_msg)
            raise SigningError(error_msg) from e

        if private_key is None or certificate is None:
            error_msg = "PFX inválido: sem chave privada ou certificado."
            if logger:
                logger.error('[NFSe Equiplano] %s' % error_msg)
            raise SigningError(error_msg)

        self.private_key = private_key
        self.certificate = certificate
        self.additional_certs = additional_certs or []

    @classmethod
    def from_pfx(cls, pfx_path: Union[str, Path], pfx_password: Optional[str] = None, logger=None):
        if logger:
            logger.info('[NFSe Equiplano] Carregando certificado PFX: %s' % pfx_path)
        with open(pfx_path, "rb") as f:
            pfx_data = f.read()
        return cls(pfx_data, pfx_password, logger=logger)

    @property
    def not_valid_before(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def not_valid_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return not (self.not_valid_before <= now <= self.not_valid_after)

    @property
    def subject(self) -> str:
        return self.certificate.subject.rfc4514_string()

    def to_base64(self) -> str:
        """Certificado em DER codificado em base64 (conteúdo do X509Certificate)."""
        return base64.b64encode(self.certificate.public_bytes(Encoding.DER)).decode()
