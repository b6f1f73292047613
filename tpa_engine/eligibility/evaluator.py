"""
Rule chain evaluator.

Runs the eligibility rules in priority order and aggregates a verdict.
A hard failure stops the chain; soft failures become warnings.
"""

from typing import Iterable, Optional

from tpa_engine.domain.eligibility import (
    EligibilityContext,
    EligibilityVerdict,
    ReasonDetail,
)
from tpa_engine.domain.enums import EligibilityReason, VerdictStatus
from tpa_engine.eligibility.rules import EligibilityRule, default_rules
from tpa_engine.utils.logging import DecisionLogger


class RuleChainEvaluator:
    """
    Evaluates an ordered chain of eligibility rules.

    Rules are sorted once at construction (stable, so equal priorities keep
    registration order). Evaluation holds no state between calls.

    Usage:
        evaluator = RuleChainEvaluator()
        verdict = evaluator.evaluate(context)
        if not verdict.eligible:
            ...
    """

    def __init__(self, rules: Optional[Iterable[EligibilityRule]] = None):
        """
        Initialize the evaluator.

        Args:
            rules: Rule instances; the default rule set if None
        """
        rule_list = list(rules) if rules is not None else default_rules()
        self._rules: tuple[EligibilityRule, ...] = tuple(
            sorted(rule_list, key=lambda r: r.priority)
        )
        self._logger = DecisionLogger(component="eligibility")

    @property
    def rules(self) -> tuple[EligibilityRule, ...]:
        return self._rules

    def active_rules(self) -> list[str]:
        """Rule codes in evaluation order."""
        return [rule.rule_code for rule in self._rules]

    def evaluate(self, context: EligibilityContext) -> EligibilityVerdict:
        """
        Run the rule chain against a context.

        Args:
            context: Eligibility context snapshot

        Returns:
            Verdict with failures, warnings and the rules that ran
        """
        failures: list[ReasonDetail] = []
        warnings: list[ReasonDetail] = []
        evaluated: list[str] = []

        for rule in self._rules:
            try:
                applicable = rule.is_applicable(context)
                result = rule.evaluate(context) if applicable else None
            except Exception as e:
                self._logger.error(
                    "eligibility_rule_error",
                    rule_code=rule.rule_code,
                    request_id=context.request_id,
                    error=str(e),
                    exc_info=True,
                )
                evaluated.append(rule.rule_code)
                failures.append(
                    ReasonDetail(
                        rule_code=rule.rule_code,
                        reason_code=EligibilityReason.SYSTEM_ERROR,
                        detail=f"Rule {rule.rule_code} failed: {e}",
                        hard_failure=True,
                    )
                )
                break

            if not applicable:
                continue
            evaluated.append(rule.rule_code)
            if result.passed:
                continue

            reason = result.reason or EligibilityReason.SYSTEM_ERROR
            hard = rule.is_hard_rule and reason.hard_failure
            entry = ReasonDetail(
                rule_code=rule.rule_code,
                reason_code=reason,
                detail=result.detail,
                hard_failure=hard,
            )
            self._logger.rule_failed(
                rule.rule_code,
                reason.value,
                hard,
                request_id=context.request_id,
            )

            if hard:
                failures.append(entry)
                break
            warnings.append(entry)

        eligible = not failures
        if not eligible:
            status = VerdictStatus.NOT_ELIGIBLE
        elif warnings:
            status = VerdictStatus.WARNING
        else:
            status = VerdictStatus.ELIGIBLE

        return EligibilityVerdict(
            eligible=eligible,
            status=status,
            failures=tuple(failures),
            warnings=tuple(warnings),
            rules_evaluated=tuple(evaluated),
            request_id=context.request_id,
            member_id=context.member_id,
            service_date=context.service_date,
        )
