"""
Funções utilitárias para montagem das requisições SOAP.
"""

from html.entities import codepoint2name
from typing import Dict, Iterable, List

# aspas duplas ficam como estão (ENT_NOQUOTES)
_NOQUOTES = {ord('"')}


def html_entities(value: str) -> str:
    """
    Codifica o texto com entidades HTML nomeadas.

    Equivale ao htmlentities(value, ENT_NOQUOTES) usado pelos webservices
    Equiplano: além de &, < e >, caracteres acentuados viram entidades
    (ex.: "ç" -> "&ccedil;"). Entidades já existentes são codificadas de novo.

    Args:
        value: Texto a ser codificado

    Returns:
        Texto codificado
    """
    return "".join(
        "&%s;" % codepoint2name[ord(ch)]
        if ord(ch) in codepoint2name and ord(ch) not in _NOQUOTES
        else ch
        for ch in value
    )


def content_length(value: str) -> int:
    """Tamanho em bytes do texto codificado em UTF-8."""
    return len(value.encode("utf-8"))


def soap_headers(action: str, request: str) -> List[str]:
    return [
        'Content-Type: application/soap+xml;charset=UTF-8;action="%s"' % action,
        "Content-length: %d" % content_length(request),
    ]


def headers_to_dict(headers: Iterable[str]) -> Dict[str, str]:
    """
    Converte a lista de cabeçalhos "Nome: valor" em dicionário.
    """
    result = {}
    for header in headers:
        name, sep, value = header.partition(":")
        if not sep:
            continue
        result[name.strip()] = value.strip()
    return result
