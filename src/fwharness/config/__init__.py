#
# config/__init__.py
#
"""
Configuration handling sub-package for fwharness.

Exports the loading function and core configuration models.
"""

from .loader import load_config
from .models import (
    EXECUTABLE_FILE_NAME,
    PROVIDER_FILE_NAME,
    BuildArtifactPaths,
    FrameworkDescriptor,
    GlobalConfig,
    HarnessConfig,
    TestRunConfig,
    TestRunConfigBuilder,
    ToolsConfig,
)

__all__ = [
    "EXECUTABLE_FILE_NAME",
    "PROVIDER_FILE_NAME",
    "BuildArtifactPaths",
    "FrameworkDescriptor",
    "GlobalConfig",
    "HarnessConfig",
    "TestRunConfig",
    "TestRunConfigBuilder",
    "ToolsConfig",
    "load_config",
]

# 🔼⚙️
