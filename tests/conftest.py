"""Shared fixtures for flowpath tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from flowpath.config import CONFIG_FILE, FlowpathConfig, save_config

if TYPE_CHECKING:
    from pathlib import Path

ESTEBAN = {"data": {"name": "Esteban", "age": 32}}


@pytest.fixture
def attribute_config() -> FlowpathConfig:
    config = FlowpathConfig()
    config.router.destination = "attribute"
    config.queries = {
        "name": "$.data.name",
        "age": "$.data.age",
        "xxx": "$.data.xxx",
    }
    return config


@pytest.fixture
def project_dir(tmp_path: Path, attribute_config: FlowpathConfig) -> Path:
    """A temporary directory holding a flowpath.toml and two JSON documents."""
    save_config(attribute_config, tmp_path / CONFIG_FILE)
    (tmp_path / "esteban.json").write_text(json.dumps(ESTEBAN), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{data: nope", encoding="utf-8")
    return tmp_path
