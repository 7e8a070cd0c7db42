import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from nfse_equiplano import Pkcs12Transport, TransportError, extract_content_from_response
from nfse_equiplano import transmitter
from nfse_equiplano.utils import soap_headers

URL = "https://svc.example/prod"
ACTION = "urn:EnviarLoteRps"
REQUEST = "<soap:Envelope>ção</soap:Envelope>"


class FakeResponse:

    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        self.content = content


@pytest.fixture
def post_calls(monkeypatch):
    calls = []
    responses = []

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        result = responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(transmitter, "pkcs12_post", fake_post)
    return calls, responses


def test_posts_envelope_with_certificate(certificate, post_calls):
    calls, responses = post_calls
    responses.append(FakeResponse(200, b"<return>OK</return>"))
    transport = Pkcs12Transport(certificate, timeout=5, verify=False)

    body = transport.send("EnviarLoteRps", URL, ACTION, REQUEST, soap_headers(ACTION, REQUEST))

    assert body == b"<return>OK</return>"
    url, kwargs = calls[0]
    assert url == URL
    assert kwargs["data"] == REQUEST.encode("utf-8")
    assert kwargs["headers"] == {
        "Content-Type": 'application/soap+xml;charset=UTF-8;action="urn:EnviarLoteRps"',
        "Content-length": str(len(REQUEST.encode("utf-8"))),
    }
    assert kwargs["pkcs12_data"] == certificate.pfx_data
    assert kwargs["pkcs12_password"] == certificate.pfx_password
    assert kwargs["timeout"] == 5
    assert kwargs["verify"] is False
    assert transport.last_status == 200
    assert transport.last_request == REQUEST


def test_http_error_carries_fault(certificate, post_calls):
    calls, responses = post_calls
    fault = (
        '<env:Envelope xmlns:env="http://www.w3.org/2003/05/soap-envelope"><env:Body><env:Fault>'
        "<env:Reason><env:Text>Operacao invalida</env:Text></env:Reason>"
        "</env:Fault></env:Body></env:Envelope>"
    )
    responses.append(FakeResponse(500, fault.encode("utf-8")))
    transport = Pkcs12Transport(certificate)

    with pytest.raises(TransportError) as exc_info:
        transport.send("EnviarLoteRps", URL, ACTION, REQUEST, [])

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == fault.encode("utf-8")
    assert "Operacao invalida" in str(exc_info.value)
    assert transport.last_response == fault.encode("utf-8")


@pytest.mark.parametrize("error", [RequestsConnectionError("recusada"), ValueError("certificado expirado")])
def test_network_failure(certificate, post_calls, error):
    calls, responses = post_calls
    responses.append(error)

    with pytest.raises(TransportError) as exc_info:
        Pkcs12Transport(certificate).send("EnviarLoteRps", URL, ACTION, REQUEST, [])

    assert exc_info.value.__cause__ is error
    assert len(calls) == 1


def test_default_transport_factory(certificate):
    transport = transmitter.default_transport(certificate)
    assert isinstance(transport, Pkcs12Transport)
    assert transport.timeout == transmitter.DEFAULT_TIMEOUT


def test_returns_raw_bytes_with_declared_encoding(certificate, post_calls):
    calls, responses = post_calls
    content = '<?xml version="1.0" encoding="ISO-8859-1"?><r><return>Município</return></r>'.encode("latin-1")
    responses.append(FakeResponse(200, content))

    body = Pkcs12Transport(certificate).send("EnviarLoteRps", URL, ACTION, REQUEST, [])

    assert body == content
    assert extract_content_from_response(body) == "Município"
