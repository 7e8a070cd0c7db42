"""
Parâmetros dos webservices por município (namespace, versão, URLs e entidade).
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .config import Environment
from .exceptions import ConfigurationError

URLS_WEBSERVICES = Path(__file__).parent / "storage" / "urls_webservices.json"


@dataclass(frozen=True)
class MunicipalityMetadata:
    soapns: str
    version: str
    homologacao: str = ""
    producao: str = ""
    entidade: str = ""

    def url_for(self, environment: Environment) -> str:
        if environment == Environment.PRODUCAO:
            return self.producao
        return self.homologacao

    @classmethod
    def from_dict(cls, data: Mapping) -> "MunicipalityMetadata":
        return cls(
            soapns=str(data.get("soapns") or ""),
            version=str(data.get("version") or ""),
            homologacao=str(data.get("homologacao") or ""),
            producao=str(data.get("producao") or ""),
            entidade=str(data.get("entidade") or ""),
        )


class MunicipalityRegistry:
    """
    Tabela somente leitura de parâmetros por código de município.

    A tabela é copiada na construção e exposta como mapping imutável,
    não há como alterá-la depois de carregada.
    """

    def __init__(self, entries: Mapping[str, Union[MunicipalityMetadata, Mapping]]):
        table = {}
        for code, data in entries.items():
            if not isinstance(data, MunicipalityMetadata):
                data = MunicipalityMetadata.from_dict(data)
            table[str(code)] = data
        self._entries = MappingProxyType(table)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MunicipalityRegistry":
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError("Não foi possível ler a tabela de municípios %s: %s" % (path, e)) from e
        return cls(data)

    @property
    def codes(self):
        return tuple(self._entries)

    def get(self, code) -> Optional[MunicipalityMetadata]:
        return self._entries.get(str(code))

    def resolve(self, code) -> MunicipalityMetadata:
        metadata = self.get(code)
        if metadata is None:
            raise ConfigurationError("Não localizado parâmetros para esse municipio (%s)." % code)
        if not metadata.soapns or not metadata.version:
            raise ConfigurationError("Parâmetros incompletos para esse municipio (%s): soapns e version são obrigatórios."
                                     % code)
        return metadata

    def __contains__(self, code):
        return str(code) in self._entries

    def __len__(self):
        return len(self._entries)


@lru_cache(maxsize=1)
def default_registry() -> MunicipalityRegistry:
    """Tabela distribuída com o pacote, carregada uma única vez por processo."""
    return MunicipalityRegistry.from_file(URLS_WEBSERVICES)
