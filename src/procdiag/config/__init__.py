"""
Configuration management for the procdiag package.

This module provides loading of session options from TOML files and their
validation into SessionConfig instances.
"""

from .loader import DEFAULT_SECTION, load_session_config, load_toml_file
from .validators import validate_session_config

__all__ = [
    "DEFAULT_SECTION",
    "load_session_config",
    "load_toml_file",
    "validate_session_config",
]
