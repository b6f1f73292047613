"""
Configuration validation for the TPA decision engine.

Provides additional validation beyond Pydantic model validation.
"""

import structlog

from tpa_engine.config.models import EngineConfig

logger = structlog.get_logger()


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def validate_config(config: EngineConfig) -> list[str]:
    """
    Validate engine configuration.

    Performs cross-field checks that Pydantic models cannot express on
    their own.

    Args:
        config: EngineConfig to validate

    Returns:
        List of warning messages (non-fatal issues)

    Raises:
        ConfigurationError: If configuration has fatal issues
    """
    warnings: list[str] = []
    errors: list[str] = []

    # Future horizon must be shorter than the past window
    past_window_days = config.eligibility.max_past_years * 365
    if config.eligibility.max_future_days >= past_window_days:
        errors.append(
            f"max_future_days ({config.eligibility.max_future_days}) must be "
            f"shorter than the past window ({past_window_days} days)"
        )

    if config.eligibility.max_future_days > 365:
        warnings.append(
            f"max_future_days ({config.eligibility.max_future_days}) exceeds one year. "
            "Pre-authorizations this far ahead usually cross a policy period."
        )

    if config.eligibility.max_future_days == 0:
        warnings.append(
            "max_future_days is 0: every future service date will be rejected, "
            "including pre-authorization requests."
        )

    if config.coverage.system_default_coverage_percent == 0:
        warnings.append(
            "system_default_coverage_percent is 0: rules without an explicit "
            "percent on policies without a default will cover nothing."
        )

    for warning in warnings:
        logger.warning("config_validation_warning", message=warning)

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return warnings
