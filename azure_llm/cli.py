"""Typer-powered command line interface for inspecting Azure OpenAI settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .builder import build_endpoint
from .config import load_provider_config, read_config_file
from .core import COMMON_MODELS, DEFAULT_API_VERSION, ProviderConfig


app = typer.Typer(
    add_completion=False,
    help=(
        "Inspect the Azure OpenAI provider configuration resolved from a "
        "configuration file or AZURE_OPENAI_* environment variables."
    ),
)


def _load_config(path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Load an optional configuration file in JSON or YAML format."""

    if path is None:
        return None
    if not path.exists():
        raise typer.BadParameter(f"Configuration file '{path}' was not found.")
    try:
        return read_config_file(path)
    except ValueError as exc:
        raise typer.BadParameter(f"Failed to parse configuration: {exc}") from exc


def _raise_cli_error(exc: Exception) -> None:
    """Render an informative error message and abort the command."""

    message = str(exc).strip() or exc.__class__.__name__
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1) from exc


def _redacted(provider: ProviderConfig) -> Dict[str, Any]:
    payload = provider.model_dump()
    if payload.get("api_key"):
        payload["api_key"] = "***"
    if payload["headers"].get("api-key"):
        payload["headers"]["api-key"] = "***"
    return payload


def _render_provider(provider: ProviderConfig, *, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps(_redacted(provider), indent=2, ensure_ascii=False))
        return
    typer.echo(f"resource:    {provider.azure_resource_name}")
    typer.echo(f"api-version: {provider.azure_api_version}")
    typer.echo(f"base url:    {provider.base_url}")
    for model in provider.models:
        typer.echo(f"model:       {model.id} ({model.name})")


@app.command()
def show(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a JSON or YAML configuration file."),
    json_output: bool = typer.Option(False, "--json/--no-json", help="Emit JSON instead of plain text."),
) -> None:
    """Resolve the provider configuration and print it (keys redacted)."""

    config_data = _load_config(config)
    try:
        provider = load_provider_config(config_data)
    except (OSError, ValueError) as exc:
        _raise_cli_error(exc)
    if provider is None:
        _raise_cli_error(
            RuntimeError(
                "Azure OpenAI is not configured. Set AZURE_OPENAI_API_KEY, AZURE_OPENAI_DEPLOYMENT_NAME and "
                "AZURE_OPENAI_RESOURCE_NAME (or AZURE_OPENAI_ENDPOINT), or pass --config."
            )
        )
    _render_provider(provider, json_output=json_output)


@app.command()
def endpoint(
    resource: str = typer.Argument(..., help="Azure OpenAI resource name."),
    deployment: str = typer.Argument(..., help="Model deployment name."),
    api_version: str = typer.Option(DEFAULT_API_VERSION, "--api-version", "-v", help="API version query parameter."),
) -> None:
    """Print the full chat-completions URL of a deployment."""

    typer.echo(build_endpoint(resource, deployment, api_version))


@app.command()
def models(
    json_output: bool = typer.Option(False, "--json/--no-json", help="Emit JSON instead of plain text."),
) -> None:
    """List models commonly deployed on Azure OpenAI."""

    if json_output:
        payload = {name: entry.model_dump() for name, entry in COMMON_MODELS.items()}
        typer.echo(json.dumps(payload, indent=2))
        return
    for name, entry in COMMON_MODELS.items():
        typer.echo(f"{name}\tinput={','.join(entry.input)}\tcontext={entry.context_window}")


def main() -> None:
    """Entry point compatible with ``python -m azure_llm.cli``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
