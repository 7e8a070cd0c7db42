"""
Exceções lançadas pela biblioteca nfse_equiplano.
"""


class NFSeEquiplanoError(Exception):
    """Erro base da biblioteca."""


class ConfigurationError(NFSeEquiplanoError):
    """Configuração inválida ou município sem parâmetros cadastrados."""


class MissingEndpointError(NFSeEquiplanoError):
    """Não há URL registrada para o ambiente selecionado do município."""


class SigningError(NFSeEquiplanoError):
    """Certificado inválido/vencido ou conteúdo impossível de assinar."""


class TransportError(NFSeEquiplanoError):
    """
    Falha na comunicação com o webservice.

    Carrega o status HTTP e o corpo da resposta quando existirem.
    """

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseParseError(NFSeEquiplanoError):
    """Resposta do webservice não é um XML bem formado."""
