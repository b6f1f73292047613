"""
Pydantic configuration models for the TPA decision engine.

These models define the structure and validation for engine configuration.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class EligibilityConfig(BaseModel):
    """Eligibility rule chain parameters."""

    max_future_days: int = Field(
        default=90,
        ge=0,
        description=(
            "Maximum days after today a service date may fall. Future dates "
            "inside this horizon are accepted with a warning for "
            "pre-authorization; later dates are rejected."
        ),
    )
    max_past_years: int = Field(
        default=2,
        ge=1,
        description="Service dates older than this many years are rejected",
    )


class CoverageConfig(BaseModel):
    """Coverage computation parameters."""

    system_default_coverage_percent: int = Field(
        default=80,
        ge=0,
        le=100,
        description=(
            "Coverage percent used when neither the rule nor the policy "
            "defines one"
        ),
    )
    currency: str = Field(
        default="LYD",
        min_length=3,
        max_length=3,
        description="ISO currency code used in limit messages",
    )
    amount_places: int = Field(
        default=2,
        ge=0,
        le=4,
        description="Decimal places for covered/patient amounts (half-up rounding)",
    )

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        """Normalize currency code to upper case."""
        return v.upper()


class ClaimWorkflowConfig(BaseModel):
    """Claim lifecycle parameters."""

    super_admin_bypass: bool = Field(
        default=True,
        description=(
            "Allow SUPER_ADMIN to perform any transition present in the "
            "transition table regardless of the role gate"
        ),
    )


class LoggingConfig(BaseModel):
    """Logging output parameters."""

    level: str = Field(default="INFO", description="Log level")
    json_output: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("level")
    @classmethod
    def known_level(cls, v: str) -> str:
        """Ensure the level is one the logging module understands."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class EngineConfig(BaseSettings):
    """
    Root engine configuration.

    Values can be loaded from YAML files and overridden via environment
    variables, e.g. ``TPA_ENGINE_ELIGIBILITY__MAX_FUTURE_DAYS=30``.
    """

    eligibility: EligibilityConfig = Field(default_factory=EligibilityConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    claims: ClaimWorkflowConfig = Field(default_factory=ClaimWorkflowConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "TPA_ENGINE_",
        "env_nested_delimiter": "__",
    }
