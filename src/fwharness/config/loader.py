#
# config/loader.py
#
"""
Loads fwharness configuration from a TOML file into attrs models.
"""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from fwharness.config.models import (
    FrameworkDescriptor,
    GlobalConfig,
    HarnessConfig,
    TestRunConfig,
    ToolsConfig,
)
from fwharness.exceptions import ConfigurationError, FwHarnessError
from fwharness.stub import Language, collect_sources

log = structlog.get_logger("config.loader")

# Environment variables that override [global] values from the file.
ENV_OVERRIDES = {
    "FWHARNESS_LOG_LEVEL": "log_level",
    "FWHARNESS_OUTPUT_ROOT": "output_root",
    "FWHARNESS_TARGET": "target",
}

_FRAMEWORK_KEYS = {"name", "sources", "bitcode", "artifact", "library", "opts"}
_TEST_KEYS = {"sources", "frameworks", "full_bitcode", "codesign"}


def _check_keys(section: str, data: Mapping[str, Any], allowed: set[str]) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"Unknown key(s) in [{section}]: {sorted(unknown)}")


def _resolve(base_dir: Path, value: str | Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def _structure_framework(test_name: str, data: Mapping[str, Any], base_dir: Path) -> FrameworkDescriptor:
    _check_keys(f"tests.{test_name}.frameworks", data, _FRAMEWORK_KEYS)
    if "name" not in data:
        raise ValueError(f"Framework in test '{test_name}' has no 'name'")
    name = data["name"]
    return FrameworkDescriptor(
        name=name,
        sources=collect_sources((_resolve(base_dir, s) for s in data.get("sources", [])), Language.KOTLIN),
        bitcode=bool(data.get("bitcode", False)),
        artifact=data.get("artifact") or name,
        library=data.get("library"),
        opts=data.get("opts", []),
    )


def _structure_test(test_name: str, data: Mapping[str, Any], base_dir: Path) -> TestRunConfig:
    _check_keys(f"tests.{test_name}", data, _TEST_KEYS)
    frameworks = [_structure_framework(test_name, fw, base_dir) for fw in data.get("frameworks", [])]
    return TestRunConfig(
        test_name=test_name,
        sources=[_resolve(base_dir, s) for s in data.get("sources", [])],
        frameworks=frameworks,
        full_bitcode=bool(data.get("full_bitcode", False)),
        codesign=bool(data.get("codesign", True)),
    )


def _global_values(data: Mapping[str, Any], base_dir: Path) -> dict[str, Any]:
    values = dict(data)
    for env_var, key in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_var)
        if env_value:
            log.debug("Applying environment override", env_var=env_var, key=key)
            values[key] = env_value
    for key in ("output_root", "harness_main"):
        if key in values:
            values[key] = _resolve(base_dir, values[key])
    if values.get("system_runtime_min_host_version") == "":
        values["system_runtime_min_host_version"] = None
    return values


def load_config(config_path: Path) -> HarnessConfig:
    """
    Reads and validates a TOML configuration file.

    Relative paths in the file are resolved against the file's directory.

    Raises:
        ConfigurationError: If the file cannot be read or fails validation.
    """
    config_path = Path(config_path)
    load_log = log.bind(path=str(config_path))
    load_log.debug("Loading configuration", emoji_key="path")

    try:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError("Configuration file not found", path=str(config_path)) from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Cannot parse configuration: {e}", path=str(config_path)) from e

    base_dir = config_path.resolve().parent
    try:
        global_config = GlobalConfig(**_global_values(raw.get("global", {}), base_dir))
        tools = ToolsConfig(**raw.get("tools", {}))
        tests = {
            name: _structure_test(name, data, base_dir)
            for name, data in raw.get("tests", {}).items()
        }
    except ConfigurationError as e:
        e.path = str(config_path)
        e.add_note(f"Config: '{config_path}'")
        raise
    except (TypeError, ValueError, FwHarnessError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}", path=str(config_path)) from e

    load_log.info("Configuration loaded", tests=len(tests), target=global_config.target.value)
    return HarnessConfig(tests=tests, global_config=global_config, tools=tools)

# 🔼⚙️
