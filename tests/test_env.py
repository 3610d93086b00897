"""Tests for resolving Azure settings from environment variables."""
from __future__ import annotations

from azure_llm.core import AzureConfig, common_model
from azure_llm.env import AZURE_OPENAI_ENV, parse_resource_name, resolve_from_env


def test_resource_name_is_parsed_from_endpoint():
    config = resolve_from_env(
        {
            "AZURE_OPENAI_API_KEY": "k",
            "AZURE_OPENAI_ENDPOINT": "https://foo.openai.azure.com",
            "AZURE_OPENAI_DEPLOYMENT_NAME": "d",
        }
    )

    assert config == AzureConfig(
        resource_name="foo",
        deployment_name="d",
        api_version="2024-08-01-preview",
        api_key="k",
    )


def test_empty_environment_resolves_to_none():
    assert resolve_from_env({}) is None


def test_explicit_resource_name_wins_over_endpoint():
    config = resolve_from_env(
        {
            "AZURE_OPENAI_API_KEY": " k ",
            "AZURE_OPENAI_RESOURCE_NAME": " direct ",
            "AZURE_OPENAI_ENDPOINT": "https://foo.openai.azure.com/",
            "AZURE_OPENAI_DEPLOYMENT_NAME": "d",
            "AZURE_OPENAI_API_VERSION": "2025-01-01-preview",
        }
    )

    assert config is not None
    assert config.resource_name == "direct"
    assert config.api_key == "k"
    assert config.api_version == "2025-01-01-preview"


def test_blank_values_count_as_missing():
    env = {
        "AZURE_OPENAI_API_KEY": "k",
        "AZURE_OPENAI_RESOURCE_NAME": "res",
        "AZURE_OPENAI_DEPLOYMENT_NAME": "   ",
        "AZURE_OPENAI_API_VERSION": "  ",
    }

    assert resolve_from_env(env) is None

    env["AZURE_OPENAI_DEPLOYMENT_NAME"] = "d"
    assert resolve_from_env(env).api_version == "2024-08-01-preview"


def test_deployment_name_has_no_endpoint_fallback():
    env = {
        "AZURE_OPENAI_API_KEY": "k",
        "AZURE_OPENAI_ENDPOINT": "https://foo.openai.azure.com/openai/deployments/gpt-4o",
    }

    assert resolve_from_env(env) is None


def test_unparseable_endpoint_leaves_resource_missing():
    env = {
        "AZURE_OPENAI_API_KEY": "k",
        "AZURE_OPENAI_ENDPOINT": "https://foo.cognitiveservices.azure.com",
        "AZURE_OPENAI_DEPLOYMENT_NAME": "d",
    }

    assert resolve_from_env(env) is None
    assert parse_resource_name("https://foo.cognitiveservices.azure.com") is None


def test_defaults_to_process_environment(monkeypatch):
    for name in (
        AZURE_OPENAI_ENV.api_key,
        AZURE_OPENAI_ENV.resource_name,
        AZURE_OPENAI_ENV.deployment_name,
        AZURE_OPENAI_ENV.api_version,
        AZURE_OPENAI_ENV.endpoint,
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "k")
    monkeypatch.setenv("AZURE_OPENAI_RESOURCE_NAME", "envres")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT_NAME", "gpt-5")

    config = resolve_from_env()

    assert config is not None
    assert config.resource_name == "envres"
    assert config.deployment_name == "gpt-5"


def test_common_model_catalog():
    assert common_model("gpt-5").input == ["text", "image"]
    assert common_model("gpt-5-codex").input == ["text"]
    assert common_model("unknown") is None
