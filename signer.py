"""
Função para assinatura de XML no padrão dos webservices Equiplano.
"""

import base64
import hashlib
from lxml import etree as ET
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from typing import Union

from .certificate import Certificate
from .exceptions import SigningError
from .soap import load_fromstring

NS_DS = "http://www.w3.org/2000/09/xmldsig#"

# C14N 1.0 inclusivo, sem comentários
C14N_ALGORITHM = "http://www.w3.org/TR/2001/REC-xml-c14n-20010315"
SIGNATURE_ALGORITHM = "http://www.w3.org/2000/09/xmldsig#rsa-sha1"
DIGEST_ALGORITHM = "http://www.w3.org/2000/09/xmldsig#sha1"
ENVELOPED_TRANSFORM = "http://www.w3.org/2000/09/xmldsig#enveloped-signature"


def _c14n(element) -> bytes:
    # no próprio documento: herda os namespaces declarados nos ancestrais
    return ET.tostring(element, method="c14n", exclusive=False, with_comments=False)


def _find_element(root, tagname: str):
    for element in root.iter(ET.Element):
        if ET.QName(element).localname == tagname:
            return element
    return None


def assinar_xml(
        certificate: Certificate,
        xml_input: Union[str, bytes],
        tagname: str,
        logger=None
) -> str:
    """
    Assina a tag especificada do XML (formato Enveloped).

    A referência é montada sem URI (URI="") e sem C14N exclusiva; a
    assinatura é inserida como último filho da tag assinada.

    Args:
        certificate: Certificado A1 carregado
        xml_input: XML como string ou bytes
        tagname: Tag a ser assinada
        logger: Logger opcional para registro de eventos

    Returns:
        XML assinado como string, sem declaração XML
    """
    if logger:
        logger.info('[NFSe Equiplano] Iniciando assinatura de XML - Tag: %s' % tagname)

    # === 1) Valida o certificado ===
    if certificate.is_expired():
        error_msg = "Certificado fora do prazo de validade (válido até %s)." % certificate.not_valid_after
        if logger:
            logger.error('[NFSe Equiplano] %s' % error_msg)
        raise SigningError(error_msg)

    if not xml_input:
        error_msg = "Não há conteúdo XML para assinar."
        if logger:
            logger.error('[NFSe Equiplano] %s' % error_msg)
        raise SigningError(error_msg)

    # === 2) Carrega o XML ===
    try:
        root = load_fromstring(xml_input)
    except ET.XMLSyntaxError as e:
        error_msg = "XML mal formado: %s" % e
        if logger:
            logger.error('[NFSe Equiplano] %s' % error_msg)
        raise SigningError(error_msg) from e

    # === 3) Localiza o elemento a ser assinado ===
    target_element = _find_element(root, tagname)
    if target_element is None:
        error_msg = f"Elemento <{tagname}> não encontrado."
        if logger:
            logger.error('[NFSe Equiplano] %s' % error_msg)
        raise SigningError(error_msg)

    # === 4) Canonicaliza e calcula o DigestValue ===
    digest = hashlib.sha1(_c14n(target_element)).digest()
    digest_b64 = base64.b64encode(digest).decode("utf-8")

    if logger:
        logger.info('[NFSe Equiplano] Digest calculado: %s...' % digest_b64[:20])

    # === 5) Monta a estrutura de assinatura ===
    Signature = ET.Element("{%s}Signature" % NS_DS, nsmap={None: NS_DS})

    SignedInfo = ET.SubElement(Signature, "{%s}SignedInfo" % NS_DS)
    ET.SubElement(SignedInfo, "{%s}CanonicalizationMethod" % NS_DS, Algorithm=C14N_ALGORITHM)
    ET.SubElement(SignedInfo, "{%s}SignatureMethod" % NS_DS, Algorithm=SIGNATURE_ALGORITHM)

    Reference = ET.SubElement(SignedInfo, "{%s}Reference" % NS_DS, URI="")
    Transforms = ET.SubElement(Reference, "{%s}Transforms" % NS_DS)
    ET.SubElement(Transforms, "{%s}Transform" % NS_DS, Algorithm=ENVELOPED_TRANSFORM)
    ET.SubElement(Transforms, "{%s}Transform" % NS_DS, Algorithm=C14N_ALGORITHM)
    ET.SubElement(Reference, "{%s}DigestMethod" % NS_DS, Algorithm=DIGEST_ALGORITHM)
    ET.SubElement(Reference, "{%s}DigestValue" % NS_DS).text = digest_b64

    target_element.append(Signature)

    # === 6) Canonicaliza SignedInfo já inserido no documento e assina ===
    signature_raw = certificate.private_key.sign(_c14n(SignedInfo), padding.PKCS1v15(), hashes.SHA1())
    signature_b64 = base64.b64encode(signature_raw).decode("utf-8")

    # === 7) Insere SignatureValue e KeyInfo ===
    ET.SubElement(Signature, "{%s}SignatureValue" % NS_DS).text = signature_b64

    KeyInfo = ET.SubElement(Signature, "{%s}KeyInfo" % NS_DS)
    X509Data = ET.SubElement(KeyInfo, "{%s}X509Data" % NS_DS)
    ET.SubElement(X509Data, "{%s}X509Certificate" % NS_DS).text = certificate.to_base64()

    xml_final = ET.tostring(root, encoding="utf-8", xml_declaration=False).decode("utf-8")

    if logger:
        logger.info('[NFSe Equiplano] XML assinado com sucesso (tamanho final: %d caracteres)' % len(xml_final))

    return xml_final
