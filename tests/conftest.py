from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from nfse_equiplano import Certificate, MunicipalityRegistry, TransportError

PFX_PASSWORD = "associacao"

MUNICIPIOS_TESTE = {
    "9999": {
        "soapns": "urn:test",
        "version": "1",
        "homologacao": "https://svc.example/homolog",
        "producao": "https://svc.example/prod",
        "entidade": "77",
    },
    "8888": {
        "soapns": "http://services.enfsws.es",
        "version": "2",
        "homologacao": "https://svc.example/8888/homolog",
        "producao": "",
        "entidade": "12",
    },
}


def make_pfx(not_before, not_after, password=PFX_PASSWORD):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "EMPRESA TESTE LTDA:99999999000191")])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    return pkcs12.serialize_key_and_certificates(
        b"teste", key, cert, None, serialization.BestAvailableEncryption(password.encode())
    )


class StubTransport:
    """Transporte que registra as chamadas e devolve uma resposta fixa."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.calls = []

    def send(self, operation, url, action, request, headers):
        self.calls.append({
            "operation": operation,
            "url": url,
            "action": action,
            "request": request,
            "headers": headers,
        })
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(scope="session")
def pfx_data():
    now = datetime.now(timezone.utc)
    return make_pfx(now - timedelta(days=1), now + timedelta(days=365))


@pytest.fixture(scope="session")
def certificate(pfx_data):
    return Certificate(pfx_data, PFX_PASSWORD)


@pytest.fixture(scope="session")
def expired_certificate():
    now = datetime.now(timezone.utc)
    return Certificate(make_pfx(now - timedelta(days=400), now - timedelta(days=35)), PFX_PASSWORD)


@pytest.fixture
def registry():
    return MunicipalityRegistry(MUNICIPIOS_TESTE)


@pytest.fixture
def config_producao():
    return {"cmun": "9999", "im": "123456", "cnpj": "99999999000191", "tpamb": 1}


@pytest.fixture
def soap_ok():
    return "<soap:Envelope><soap:Body><return>OK</return></soap:Body></soap:Envelope>"


@pytest.fixture
def stub_transport(soap_ok):
    return StubTransport(response=soap_ok)


@pytest.fixture
def failing_transport():
    return StubTransport(error=TransportError("Falha de conexão"))
