import json

import pytest

from nfse_equiplano import (
    ConfigurationError,
    Environment,
    MunicipalityMetadata,
    MunicipalityRegistry,
    default_registry,
)


def test_default_registry_is_loaded_once():
    assert default_registry() is default_registry()
    assert len(default_registry()) > 0


@pytest.mark.parametrize("code", default_registry().codes)
def test_known_municipalities_have_namespace_and_version(code):
    metadata = default_registry().resolve(code)
    assert metadata.soapns
    assert metadata.version
    assert metadata.homologacao or metadata.producao


@pytest.mark.parametrize("code", ["0000000", "", "abc", None])
def test_unknown_municipality(code):
    with pytest.raises(ConfigurationError):
        default_registry().resolve(code)


def test_resolve_accepts_integer_code(registry):
    assert registry.resolve(9999) is registry.resolve("9999")
    assert 9999 in registry


def test_resolve_fabricated_municipality(registry):
    metadata = registry.resolve("9999")
    assert metadata == MunicipalityMetadata(
        soapns="urn:test",
        version="1",
        homologacao="https://svc.example/homolog",
        producao="https://svc.example/prod",
        entidade="77",
    )


def test_url_for_environment(registry):
    metadata = registry.resolve("9999")
    assert metadata.url_for(Environment.PRODUCAO) == "https://svc.example/prod"
    assert metadata.url_for(Environment.HOMOLOGACAO) == "https://svc.example/homolog"


def test_registry_is_not_affected_by_source_changes():
    entries = {"1": {"soapns": "urn:a", "version": "1"}}
    registry = MunicipalityRegistry(entries)
    entries["2"] = {"soapns": "urn:b", "version": "1"}
    entries["1"]["soapns"] = "urn:c"

    assert "2" not in registry
    assert registry.resolve("1").soapns == "urn:a"


def test_metadata_is_immutable(registry):
    with pytest.raises(AttributeError):
        registry.resolve("9999").producao = "https://outro.example"


def test_from_file(tmp_path):
    path = tmp_path / "urls.json"
    path.write_text(json.dumps({"123": {"soapns": "urn:x", "version": "3", "producao": None}}), encoding="utf-8")

    metadata = MunicipalityRegistry.from_file(path).resolve("123")

    assert metadata.version == "3"
    assert metadata.producao == ""


@pytest.mark.parametrize("content", [None, "{invalido"])
def test_from_file_errors(tmp_path, content):
    path = tmp_path / "urls.json"
    if content is not None:
        path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        MunicipalityRegistry.from_file(path)


@pytest.mark.parametrize("entry", [
    {"soapns": "", "version": "1", "producao": "https://svc.example/prod"},
    {"soapns": "urn:x", "version": "", "producao": "https://svc.example/prod"},
    {"soapns": "urn:x", "producao": "https://svc.example/prod"},
])
def test_resolve_requires_namespace_and_version(entry):
    registry = MunicipalityRegistry({"5555": entry})

    assert "5555" in registry
    with pytest.raises(ConfigurationError):
        registry.resolve("5555")
