"""Tests for loading provider configuration from mappings, files and the environment."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from azure_llm.config import load_provider_config, provider_from_mapping, read_config_file


def test_explicit_mapping_builds_multi_deployment_provider():
    provider = load_provider_config(
        {
            "resource_name": "contoso",
            "api_key": "secret",
            "deployments": [{"name": "gpt-4o"}, {"name": "gpt-5-mini", "display_name": "Mini"}],
        },
        env={},
    )

    assert provider.base_url == "https://contoso.openai.azure.com/openai/deployments/gpt-4o"
    assert [model.name for model in provider.models] == ["Azure gpt-4o", "Mini"]


def test_endpoint_can_replace_resource_name():
    provider = provider_from_mapping(
        {"endpoint": "https://fromendpoint.openai.azure.com/", "deployment_name": "gpt-4o", "reasoning": True}
    )

    assert provider.azure_resource_name == "fromendpoint"
    assert provider.models[0].reasoning is True


@pytest.mark.parametrize(
    "settings",
    [
        {"deployment_name": "gpt-4o"},
        {"resource_name": "contoso"},
    ],
)
def test_incomplete_mapping_raises(settings):
    with pytest.raises(ValueError):
        provider_from_mapping(settings)


def test_yaml_file_referenced_by_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TEST_AZURE_KEY", "from-env")
    config_file = tmp_path / "azure.yaml"
    config_file.write_text(
        "resource_name: yamlres\n"
        "api_key: ${TEST_AZURE_KEY}\n"
        "api_version: 2025-01-01-preview\n"
        "deployment_name: gpt-5\n",
        encoding="utf-8",
    )

    provider = load_provider_config(env={"AZURE_LLM_CONFIG": str(config_file)})

    assert provider.api_key == "from-env"
    assert provider.headers == {"api-key": "from-env"}
    assert provider.azure_api_version == "2025-01-01-preview"


def test_json_file_is_read(tmp_path: Path):
    config_file = tmp_path / "azure.json"
    config_file.write_text(json.dumps({"resource_name": "jsonres", "deployment_name": "d"}), encoding="utf-8")

    assert read_config_file(config_file) == {"resource_name": "jsonres", "deployment_name": "d"}


def test_non_mapping_file_is_rejected(tmp_path: Path):
    config_file = tmp_path / "azure.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        read_config_file(config_file)


def test_missing_config_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_provider_config(env={"AZURE_LLM_CONFIG": str(tmp_path / "missing.yaml")})


def test_falls_back_to_environment_variables():
    provider = load_provider_config(
        env={
            "AZURE_OPENAI_API_KEY": "k",
            "AZURE_OPENAI_ENDPOINT": "https://envres.openai.azure.com",
            "AZURE_OPENAI_DEPLOYMENT_NAME": "gpt-5",
        }
    )

    assert provider.base_url == "https://envres.openai.azure.com/openai/deployments/gpt-5"


def test_nothing_configured_returns_none():
    assert load_provider_config(env={}) is None


def test_malformed_yaml_raises_value_error(tmp_path: Path):
    config_file = tmp_path / "azure.yaml"
    config_file.write_text("resource_name: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Failed to parse configuration file"):
        read_config_file(config_file)


def test_deployments_may_be_plain_names(tmp_path: Path):
    config_file = tmp_path / "azure.yaml"
    config_file.write_text("resource_name: names\ndeployments: [gpt-4o, o1]\n", encoding="utf-8")

    provider = load_provider_config(env={"AZURE_LLM_CONFIG": str(config_file)})

    assert [model.id for model in provider.models] == ["gpt-4o", "o1"]
    assert provider.base_url.endswith("/deployments/gpt-4o")
