from pathlib import Path

import pytest

from l10n_translate.gateway import GatewayConfig, TranslationGateway

SAMPLE_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<localization xmlns="http://schemas.example.com/localization" culture="en" moduleId="core.ui">
  <group name="Common" tags="ui">
    <string key="Save">Save</string>
    <string key="Cancel">Cancel</string>
    <group name="Errors">
      <string key="NotFound">Not found</string>
      <string key="Empty"></string>
      <string key="Legacy" value="Legacy text"></string>
    </group>
  </group>
  <group name="Menu">
    <string key="Open">Open</string>
  </group>
</localization>
"""


class StubBackend:
    """Backend that maps texts through a dict and records every call."""

    def __init__(self, mapping=None, fail_on=()):
        self.mapping = mapping or {}
        self.fail_on = set(fail_on)
        self.calls = []

    def translate(self, text, source_lang, target_lang):
        self.calls.append(text)
        if text in self.fail_on:
            raise ConnectionError(f"service down for {text}")
        return self.mapping.get(text, text)


class FailingBackend:
    def __init__(self):
        self.calls = []

    def translate(self, text, source_lang, target_lang):
        self.calls.append(text)
        raise TimeoutError("request timed out")


@pytest.fixture
def sample_xml():
    return SAMPLE_XML


@pytest.fixture
def sample_file(tmp_path) -> Path:
    path = tmp_path / "strings.xml"
    path.write_bytes(SAMPLE_XML)
    return path


@pytest.fixture
def stub_backend():
    return StubBackend(
        {
            "Save": "Salvar",
            "Cancel": "Cancelar",
            "Not found": "Não encontrado",
            "Legacy text": "Texto legado",
            "Open": "Abrir",
            "Hello": "Olá",
        }
    )


@pytest.fixture
def make_gateway():
    def _make(backend, **overrides):
        config = GatewayConfig(request_delay=0, **overrides)
        return TranslationGateway(config, backend=backend)

    return _make


@pytest.fixture
def make_backend():
    return StubBackend


@pytest.fixture
def failing_backend():
    return FailingBackend()
