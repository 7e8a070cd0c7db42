"""
Transporte das requisições SOAP para os webservices municipais.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from requests.exceptions import RequestException
from requests_pkcs12 import post as pkcs12_post

from .certificate import Certificate
from .exceptions import TransportError
from .soap import extract_fault_string
from .utils import headers_to_dict

DEFAULT_TIMEOUT = 20


class SoapTransport(ABC):
    """
    Interface dos transportes injetáveis em NFSeEquiplano.load_transport().
    """

    @abstractmethod
    def send(self, operation: str, url: str, action: str, request: str, headers: List[str]) -> Union[str, bytes]:
        """
        Envia a requisição e retorna o corpo da resposta.

        Args:
            operation: Nome da operação do webservice
            url: Endereço do webservice
            action: SOAP action (urn:operacao)
            request: Envelope SOAP
            headers: Cabeçalhos HTTP no formato "Nome: valor"

        Raises:
            TransportError: Falha na comunicação
        """


class Pkcs12Transport(SoapTransport):
    """
    Transporte padrão: POST HTTPS autenticado com o certificado A1.

    Args:
        certificate: Certificado usado na autenticação TLS
        timeout: Tempo limite da requisição em segundos
        verify: Verificação do certificado do servidor (bool ou caminho de CA)
        proxies: Proxies no formato do requests
        logger: Logger opcional para registro de eventos
    """

    def __init__(self, certificate: Certificate, timeout=DEFAULT_TIMEOUT, verify=True,
                 proxies: Optional[dict] = None, logger=None):
        self.certificate = certificate
        self.timeout = timeout
        self.verify = verify
        self.proxies = proxies
        self.logger = logger
        self.last_request = None
        self.last_response = None
        self.last_status = None

    def send(self, operation, url, action, request, headers):
        if self.logger:
            self.logger.info('[NFSe Equiplano] Enviando %s para: %s' % (operation, url))
            self.logger.info('[NFSe Equiplano] Tamanho do envelope: %d caracteres' % len(request))

        self.last_request = request
        self.last_response = None
        self.last_status = None

        try:
            resp = pkcs12_post(
                url,
                data=request.encode("utf-8"),
                headers=headers_to_dict(headers),
                pkcs12_data=self.certificate.pfx_data,
                pkcs12_password=self.certificate.pfx_password,
                timeout=self.timeout,
                verify=self.verify,
                proxies=self.proxies,
            )
        except (RequestException, ValueError) as e:
            error_msg = "Falha na comunicação com %s: %s" % (url, e)
            if self.logger:
                self.logger.error('[NFSe Equiplano] %s' % error_msg)
            raise TransportError(error_msg) from e

        self.last_status = resp.status_code
        # bytes crus: o lxml respeita o encoding declarado no XML
        self.last_response = resp.content or b""

        if self.logger:
            self.logger.info('[NFSe Equiplano] Resposta HTTP recebida - Status: %s' % resp.status_code)

        if resp.status_code != 200:
            fault = extract_fault_string(self.last_response)
            error_msg = "[%s] HTTP Error code: %s" % (url, resp.status_code)
            if fault:
                error_msg += " - %s" % fault
            if self.logger:
                self.logger.error('[NFSe Equiplano] %s' % error_msg)
            raise TransportError(error_msg, status_code=resp.status_code, body=self.last_response)

        return self.last_response


def default_transport(certificate: Certificate, logger=None) -> SoapTransport:
    """Fábrica usada quando nenhum transporte foi injetado."""
    return Pkcs12Transport(certificate, logger=logger)
