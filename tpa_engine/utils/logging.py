"""
Structured logging configuration for the TPA decision engine.

Uses structlog for structured, contextual logging.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the host application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output logs as JSON
        include_timestamp: If True, include timestamp in logs
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (optional)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


class DecisionLogger:
    """
    Specialized logger for decision engine events.

    Provides convenience methods for the audit trail of eligibility checks,
    coverage computations and claim transitions.

    Usage:
        logger = DecisionLogger(component="eligibility")
        logger.eligibility_checked(request_id, member_id, eligible=True, status="ELIGIBLE")
        logger.transition_applied(claim_id, "DRAFT", "SUBMITTED", role="EMPLOYER")
    """

    def __init__(self, component: str = "engine"):
        """
        Initialize the decision logger.

        Args:
            component: Engine component emitting the events
        """
        self.component = component
        self._logger = structlog.get_logger().bind(component=component)

    def bind(self, **kwargs: Any) -> "DecisionLogger":
        """Bind additional context to the logger."""
        self._logger = self._logger.bind(**kwargs)
        return self

    # Eligibility events
    def eligibility_checked(
        self,
        request_id: str | None,
        member_id: Any,
        eligible: bool,
        status: str,
        **kwargs: Any,
    ) -> None:
        """Log the outcome of an eligibility check."""
        self._logger.info(
            "eligibility_checked",
            request_id=request_id,
            member_id=member_id,
            eligible=eligible,
            status=status,
            **kwargs,
        )

    def rule_failed(
        self,
        rule_code: str,
        reason_code: str,
        hard: bool,
        **kwargs: Any,
    ) -> None:
        """Log a failed eligibility rule."""
        self._logger.info(
            "eligibility_rule_failed",
            rule_code=rule_code,
            reason_code=reason_code,
            hard=hard,
            **kwargs,
        )

    # Coverage events
    def coverage_computed(
        self,
        policy_id: Any,
        covered: bool,
        total_requested: Any,
        total_covered: Any,
        **kwargs: Any,
    ) -> None:
        """Log a claim coverage computation."""
        self._logger.info(
            "claim_coverage_computed",
            policy_id=policy_id,
            covered=covered,
            total_requested=str(total_requested),
            total_covered=str(total_covered),
            **kwargs,
        )

    def limit_exceeded(
        self,
        limit_type: str,
        requested: Any,
        remaining: Any,
        limit: Any,
        **kwargs: Any,
    ) -> None:
        """Log an exceeded policy amount limit."""
        self._logger.warning(
            "amount_limit_exceeded",
            limit_type=limit_type,
            requested=str(requested),
            remaining=str(remaining),
            limit=str(limit),
            **kwargs,
        )

    # Claim lifecycle events
    def transition_applied(
        self,
        claim_id: Any,
        from_status: str,
        to_status: str,
        **kwargs: Any,
    ) -> None:
        """Log an applied claim transition."""
        self._logger.info(
            "claim_transition_applied",
            claim_id=claim_id,
            from_status=from_status,
            to_status=to_status,
            **kwargs,
        )

    def transition_rejected(
        self,
        from_status: str,
        to_status: str,
        **kwargs: Any,
    ) -> None:
        """Log a rejected claim transition."""
        self._logger.warning(
            "claim_transition_rejected",
            from_status=from_status,
            to_status=to_status,
            **kwargs,
        )

    # Generic events
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error."""
        self._logger.error(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning."""
        self._logger.warning(message, **kwargs)
