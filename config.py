"""
Configuração do prestador usada pela classe NFSeEquiplano.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from .exceptions import ConfigurationError

# tpamb = 1 seleciona produção, qualquer outro valor homologação
TPAMB_PRODUCAO = "1"


class Environment(str, Enum):
    HOMOLOGACAO = "homologacao"
    PRODUCAO = "producao"


@dataclass(frozen=True)
class ServiceConfig:
    """
    Dados do prestador informados pelo chamador.

    Args:
        cmun: Código IBGE do município
        im: Inscrição municipal do prestador
        cnpj: CNPJ do prestador
        tpamb: Tipo de ambiente (1 = produção, demais = homologação)
    """

    cmun: str
    im: str = ""
    cnpj: str = ""
    tpamb: Any = 2

    @property
    def environment(self) -> Environment:
        if str(self.tpamb).strip() == TPAMB_PRODUCAO:
            return Environment.PRODUCAO
        return Environment.HOMOLOGACAO

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServiceConfig":
        cmun = data.get("cmun")
        if cmun is None or str(cmun).strip() == "":
            raise ConfigurationError("Código do município (cmun) não informado na configuração.")
        return cls(
            cmun=str(cmun).strip(),
            im="" if data.get("im") is None else str(data.get("im")),
            cnpj="" if data.get("cnpj") is None else str(data.get("cnpj")),
            tpamb=data.get("tpamb", 2),
        )

    @classmethod
    def from_json(cls, content: Union[str, bytes]) -> "ServiceConfig":
        """
        Carrega a configuração a partir de um JSON.

        Exemplo: {"cmun": "4119905", "im": "12345", "cnpj": "99999999000191", "tpamb": 2}
        """
        try:
            data = json.loads(content)
        except ValueError as e:
            raise ConfigurationError("Configuração JSON inválida: %s" % e) from e
        if not isinstance(data, dict):
            raise ConfigurationError("Configuração JSON deve ser um objeto.")
        return cls.from_dict(data)


def load_config(config: Union["ServiceConfig", Mapping[str, Any], str, bytes]) -> ServiceConfig:
    """Normaliza as formas aceitas de configuração para ServiceConfig."""
    if isinstance(config, ServiceConfig):
        return config
    if isinstance(config, (str, bytes)):
        return ServiceConfig.from_json(config)
    if isinstance(config, Mapping):
        return ServiceConfig.from_dict(config)
    raise ConfigurationError("Tipo de configuração não suportado: %s" % type(config).__name__)
