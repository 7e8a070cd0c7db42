"""
Montagem do envelope SOAP e extração do conteúdo das respostas.
"""

import re

from lxml import etree as ET
from typing import Optional, Union

from .exceptions import ResponseParseError
from .utils import html_entities

NS_SOAP12 = "http://www.w3.org/2003/05/soap-envelope"

# tags verificadas em ordem: resposta do serviço, depois conteúdo da requisição
EXTRACTION_TAGS = ("return", "xml")


# declaração XML no início de uma str; o texto já está decodificado
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def _parser(recover=False):
    return ET.XMLParser(resolve_entities=False, no_network=True, huge_tree=True, recover=recover)


def load_fromstring(xml_string: Union[bytes, str], parser=None):
    """
    Carrega XML a partir de uma string.

    Bytes são entregues ao lxml como estão, respeitando o encoding da
    declaração XML. Em str a declaração é removida antes de codificar em UTF-8.

    Args:
        xml_string: XML como string ou bytes
        parser: XMLParser do lxml (padrão: parser estrito sem entidades externas)

    Returns:
        Elemento raiz do lxml
    """
    if parser is None:
        parser = _parser()
    if isinstance(xml_string, str):
        xml_string = _XML_DECLARATION.sub("", xml_string, count=1).encode("utf-8")
    return ET.fromstring(xml_string, parser)


def build_envelope(message: str, operation: str, version: str, namespace: str) -> str:
    """
    Monta o envelope SOAP 1.2 da operação.

    A mensagem vai codificada com entidades HTML dentro de <ser:xml>, após
    <ser:nrVersaoXml>. A ordem dos elementos é exigida por alguns servidores.

    Args:
        message: XML da mensagem (normalmente já assinado)
        operation: Nome da operação do webservice
        version: Versão do leiaute (nrVersaoXml)
        namespace: Namespace do serviço no município

    Returns:
        Envelope SOAP como string
    """
    msg = html_entities(message)
    return (
        f'<soap:Envelope xmlns:soap="{NS_SOAP12}" '
        f'xmlns:ser="{namespace}">'
        "<soap:Header/>"
        "<soap:Body>"
        f"<ser:{operation}>"
        f"<ser:nrVersaoXml>{version}</ser:nrVersaoXml>"
        f"<ser:xml>{msg}</ser:xml>"
        f"</ser:{operation}>"
        "</soap:Body>"
        "</soap:Envelope>"
    )


def _localname(element) -> str:
    tag = element.tag
    if "}" in tag:
        tag = tag.split("}", 1)[1]
    # prefixo sem declaração de namespace fica no nome da tag
    return tag.rsplit(":", 1)[-1]


def _find_by_localname(root, name: str):
    for element in root.iter(ET.Element):
        if _localname(element) == name:
            return element
    return None


def _text_content(element) -> str:
    return ET.tostring(element, method="text", encoding="unicode", with_tail=False)


def parse_response(response: Union[str, bytes]):
    """
    Faz o parse do envelope de resposta.

    Prefixos sem namespace declarado são tolerados, pois alguns servidores
    respondem assim; erros de boa formação não.

    Raises:
        ResponseParseError: Resposta vazia ou XML mal formado
    """
    if not response or not response.strip():
        raise ResponseParseError("Resposta vazia do webservice.")
    parser = _parser(recover=True)
    try:
        root = load_fromstring(response, parser)
    except ET.XMLSyntaxError as e:
        raise ResponseParseError("Resposta do webservice não é um XML válido: %s" % e) from e
    errors = [
        error for error in parser.error_log
        if error.level >= ET.ErrorLevels.ERROR and error.domain != ET.ErrorDomains.NAMESPACE
    ]
    if root is None or errors:
        detail = errors[0].message if errors else "documento vazio"
        raise ResponseParseError("Resposta do webservice não é um XML válido: %s" % detail)
    return root


def extract_content_from_response(response: Union[str, bytes]) -> str:
    """
    Extrai o conteúdo útil do envelope de resposta.

    Procura primeiro a tag <return> e depois a tag <xml>, devolvendo o texto
    da primeira encontrada. Sem nenhuma delas, retorna a resposta original.
    O conteúdo extraído não é validado.

    As tags são comparadas pelo nome local, ignorando o prefixo: <ns:return>
    também é aceita, diferente de getElementsByTagName('return'), que só
    encontra a tag sem prefixo.

    Args:
        response: Retorno do webservice (bytes preservam o encoding declarado)

    Returns:
        XML extraído da resposta
    """
    root = parse_response(response)
    for tag in EXTRACTION_TAGS:
        node = _find_by_localname(root, tag)
        if node is not None:
            return _text_content(node)
    if isinstance(response, bytes):
        return response.decode(root.getroottree().docinfo.encoding or "utf-8")
    return response


def extract_fault_string(response: Union[str, bytes]) -> Optional[str]:
    """
    Retorna a mensagem de um SOAP Fault (1.1 faultstring ou 1.2 Reason/Text).

    Returns:
        Mensagem do fault ou None quando a resposta não traz um
    """
    try:
        root = parse_response(response)
    except ResponseParseError:
        return None
    node = _find_by_localname(root, "faultstring")
    if node is None:
        reason = _find_by_localname(root, "Reason")
        if reason is not None:
            node = _find_by_localname(reason, "Text")
    if node is None:
        return None
    return _text_content(node).strip()
