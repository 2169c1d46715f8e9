"""
Configuration for end-to-end test runs.

This package resolves the settings e2e tests need before they start:
- flags: command line flags and environment defaults
- environment: derived values (cluster name and region, image paths, languages)
- command_runner: the capability used to shell out to kubectl and gcloud
"""
from e2e_env.command_runner import CommandRunner, SubprocessCommandRunner
from e2e_env.environment import TestEnvironment
from e2e_env.errors import (
    ClusterNameError,
    ClusterRegionError,
    CommandError,
    ConfigFileError,
    EnvironmentConfigError,
)
from e2e_env.flags import EnvironmentFlags, initialize_flags

__all__ = [
    "ClusterNameError",
    "ClusterRegionError",
    "CommandError",
    "CommandRunner",
    "ConfigFileError",
    "EnvironmentConfigError",
    "EnvironmentFlags",
    "SubprocessCommandRunner",
    "TestEnvironment",
    "initialize_flags",
]
