"""
Configuration module for the TPA decision engine.

This module provides:
- Pydantic configuration models
- YAML configuration loading
- Configuration validation
"""

from tpa_engine.config.models import (
    EngineConfig,
    EligibilityConfig,
    CoverageConfig,
    ClaimWorkflowConfig,
    LoggingConfig,
)
from tpa_engine.config.loader import load_config, resolve_config_path
from tpa_engine.config.validation import ConfigurationError, validate_config

__all__ = [
    "EngineConfig",
    "EligibilityConfig",
    "CoverageConfig",
    "ClaimWorkflowConfig",
    "LoggingConfig",
    "load_config",
    "resolve_config_path",
    "validate_config",
    "ConfigurationError",
]
