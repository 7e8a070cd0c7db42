"""
Módulo para comunicação com os webservices NFSe do provedor Equiplano.
"""

from .client import NFSeEquiplano, build_prestador_tag
from .certificate import Certificate
from .config import Environment, ServiceConfig
from .exceptions import (
    NFSeEquiplanoError,
    ConfigurationError,
    MissingEndpointError,
    SigningError,
    TransportError,
    ResponseParseError,
)
from .registry import MunicipalityMetadata, MunicipalityRegistry, default_registry
from .signer import assinar_xml
from .soap import build_envelope, extract_content_from_response, load_fromstring
from .transmitter import SoapTransport, Pkcs12Transport

__all__ = [
    'NFSeEquiplano', 'build_prestador_tag', 'Certificate', 'Environment', 'ServiceConfig',
    'NFSeEquiplanoError', 'ConfigurationError', 'MissingEndpointError', 'SigningError',
    'TransportError', 'ResponseParseError', 'MunicipalityMetadata', 'MunicipalityRegistry',
    'default_registry', 'assinar_xml', 'build_envelope', 'extract_content_from_response',
    'load_fromstring', 'SoapTransport', 'Pkcs12Transport',
]
