"""
Classe principal para comunicação com os webservices NFSe do provedor Equiplano.
"""

from typing import Optional

from .certificate import Certificate
from .config import Environment, ServiceConfig, load_config
from .exceptions import ConfigurationError, MissingEndpointError, NFSeEquiplanoError, TransportError
from .registry import MunicipalityMetadata, MunicipalityRegistry, default_registry
from .signer import assinar_xml
from .soap import build_envelope, extract_content_from_response
from .transmitter import SoapTransport, default_transport
from .utils import soap_headers


def build_prestador_tag(config: ServiceConfig, wsobj: MunicipalityMetadata) -> str:
    """
    Monta a tag <prestador> usada nas mensagens do município.

    Os valores entram como foram informados, sem validação.
    """
    return (
        "<prestador>"
        f"<nrInscricaoMunicipal>{config.im}</nrInscricaoMunicipal>"
        f"<cnpj>{config.cnpj}</cnpj>"
        f"<idEntidade>{wsobj.entidade}</idEntidade>"
        "</prestador>"
    )


class NFSeEquiplano:
    """
    Cliente dos webservices NFSe Equiplano.

    Resolve os parâmetros do município, monta o envelope SOAP de cada
    operação, delega o envio ao transporte e extrai o XML da resposta.
    Parâmetros do município, ambiente e tag do prestador são definidos na
    construção e não mudam depois.
    """

    def __init__(self, config, certificate: Certificate, registry: Optional[MunicipalityRegistry] = None,
                 transport_factory=None, logger=None):
        """
        Inicializa a classe NFSeEquiplano.

        Args:
            config: ServiceConfig, dicionário ou JSON com cmun, im, cnpj e tpamb
            certificate: Certificado A1 do prestador
            registry: Tabela de municípios (padrão: tabela distribuída com o pacote)
            transport_factory: Fábrica do transporte padrão, chamada com
                (certificate, logger) no primeiro envio sem transporte injetado
            logger: Logger opcional para registro de eventos
        """
        self.logger = logger
        self.certificate = certificate
        self._config = load_config(config)
        self._wsobj = self._load_wsobj(registry or default_registry())
        self._prestador = build_prestador_tag(self._config, self._wsobj)
        self._environment = self._config.environment
        self._transport = None
        self._transport_factory = transport_factory or default_transport
        self._last_request = None

        if self.logger:
            self.logger.info('[NFSe Equiplano] Município %s configurado - Ambiente: %s' % (
                self._config.cmun, self._environment.value
            ))

    def _load_wsobj(self, registry: MunicipalityRegistry) -> MunicipalityMetadata:
        try:
            return registry.resolve(self._config.cmun)
        except ConfigurationError as e:
            if self.logger:
                self.logger.error('[NFSe Equiplano] %s' % e)
            raise

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def wsobj(self) -> MunicipalityMetadata:
        return self._wsobj

    @property
    def prestador(self) -> str:
        return self._prestador

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def url(self) -> str:
        return self._wsobj.url_for(self._environment)

    @property
    def last_request(self) -> Optional[str]:
        """Último envelope SOAP montado (apenas o mais recente)."""
        return self._last_request

    def load_transport(self, transport: SoapTransport):
        """
        Injeta o transporte usado nos envios.

        Args:
            transport: Objeto com send(operation, url, action, request, headers)
        """
        self._transport = transport

    def _get_transport(self) -> SoapTransport:
        if self._transport is None:
            if self.logger:
                self.logger.info('[NFSe Equiplano] Nenhum transporte injetado, usando transporte padrão')
            self._transport = self._transport_factory(self.certificate, logger=self.logger)
        return self._transport

    def sign(self, content, tagname: str) -> str:
        """
        Assina o XML informado.

        Args:
            content: XML a ser assinado
            tagname: Tag a ser assinada

        Returns:
            XML assinado
        """
        return assinar_xml(self.certificate, content, tagname, logger=self.logger)

    def send(self, message: str, operation: str) -> str:
        """
        Envia a mensagem para o webservice.

        Args:
            message: XML da mensagem
            operation: Nome da operação do webservice

        Returns:
            XML extraído da resposta
        """
        action = f"urn:{operation}"

        url = self.url
        if not url:
            error_msg = ("Não está registrada a URL para o ambiente de %s desse municipio."
                         % self._environment.value)
            if self.logger:
                self.logger.error('[NFSe Equiplano] %s' % error_msg)
            raise MissingEndpointError(error_msg)

        request = build_envelope(message, operation, self._wsobj.version, self._wsobj.soapns)
        self._last_request = request

        headers = soap_headers(action, request)

        if self.logger:
            self.logger.info('[NFSe Equiplano] Enviando operação %s - Action: %s' % (operation, action))

        try:
            response = self._get_transport().send(operation, url, action, request, headers)
            content = self.extract_content_from_response(response)
        except NFSeEquiplanoError as e:
            if self.logger:
                self.logger.error('[NFSe Equiplano] Falha na operação %s: %s' % (operation, e))
            raise
        except Exception as e:
            error_msg = "Falha no transporte da operação %s: %s" % (operation, e)
            if self.logger:
                self.logger.error('[NFSe Equiplano] %s' % error_msg)
            raise TransportError(error_msg) from e

        if self.logger:
            self.logger.info('[NFSe Equiplano] Resposta da operação %s extraída (tamanho: %d caracteres)' % (
                operation, len(content)
            ))
        return content

    @staticmethod
    def extract_content_from_response(response) -> str:
        """
        Extrai o XML de resposta do envelope SOAP.

        Args:
            response: Retorno do webservice

        Returns:
            XML extraído da resposta
        """
        return extract_content_from_response(response)
