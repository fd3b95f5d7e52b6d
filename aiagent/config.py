"""
config.py

Responsibility: Load runtime configuration into one explicit `Config` value
that the CLI passes down; nothing reads the environment after startup.

Precedence, lowest first:
1) Built-in defaults
2) Optional YAML config file (`--config`), for non-secret settings
3) Optional `.env` file, only for variables not already set
4) Process environment

Secrets are not validated here: a missing token simply produces an
authorization failure from the remote API.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from aiagent.errors import ConfigurationError
from aiagent.openai_client import DEFAULT_API_BASE, DEFAULT_README_MODEL, DEFAULT_TASK_MODEL


@dataclass(frozen=True)
class Config:
    github_token: str = ""
    github_username: str = ""
    openai_api_key: str = ""
    github_api_base: str = "https://api.github.com"
    openai_api_base: str = DEFAULT_API_BASE
    task_model: str = DEFAULT_TASK_MODEL
    readme_model: str = DEFAULT_README_MODEL
    private: bool = False
    auto_init: bool = True
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # Never show secrets in logs or tracebacks.
        hidden = {"github_token", "openai_api_key"}
        parts = ", ".join(
            f"{k}={'***' if k in hidden and v else v!r}" for k, v in self.__dict__.items()
        )
        return f"Config({parts})"


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"`{name}` must be an object/mapping when provided.")
    return raw


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Config file is not valid YAML: {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must be a mapping/object at the top level.")
    return data


def _apply_yaml(cfg: Config, data: dict[str, Any]) -> Config:
    gh = _section(data, "github")
    ai = _section(data, "openai")
    updates: dict[str, Any] = {}
    if gh.get("api_base"):
        updates["github_api_base"] = str(gh["api_base"]).strip()
    if gh.get("username"):
        updates["github_username"] = str(gh["username"]).strip()
    if "private" in gh:
        updates["private"] = bool(gh["private"])
    if "auto_init" in gh:
        updates["auto_init"] = bool(gh["auto_init"])
    if ai.get("api_base"):
        updates["openai_api_base"] = str(ai["api_base"]).strip()
    if ai.get("task_model"):
        updates["task_model"] = str(ai["task_model"]).strip()
    if ai.get("readme_model"):
        updates["readme_model"] = str(ai["readme_model"]).strip()
    if data.get("log_level"):
        updates["log_level"] = str(data["log_level"]).strip().upper()
    return replace(cfg, **updates)


def load_config(
    *,
    environ: Mapping[str, str] | None = None,
    dotenv_path: str | Path | None = ".env",
    config_path: str | Path | None = None,
) -> Config:
    env = dict(os.environ if environ is None else environ)

    cfg = Config()
    if config_path is not None:
        cfg = _apply_yaml(cfg, _load_yaml(Path(config_path)))

    if dotenv_path is not None:
        path = Path(dotenv_path)
        if path.is_file():
            for k, v in dotenv_values(path, encoding="utf-8").items():
                # A bare `KEY` line has no value and sets nothing.
                if v is not None:
                    env.setdefault(k, v)

    updates: dict[str, Any] = {}
    if "GITHUB_TOKEN" in env:
        updates["github_token"] = env["GITHUB_TOKEN"]
    if env.get("GITHUB_USERNAME"):
        updates["github_username"] = env["GITHUB_USERNAME"]
    if "OPENAI_API_KEY" in env:
        updates["openai_api_key"] = env["OPENAI_API_KEY"]
    if env.get("AIAGENT_LOG_LEVEL"):
        updates["log_level"] = env["AIAGENT_LOG_LEVEL"].strip().upper()
    return replace(cfg, **updates)
