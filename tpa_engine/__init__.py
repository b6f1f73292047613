"""
TPA Decision Engine
===================

Eligibility, coverage and claim lifecycle decisions for a Third-Party
Administrator insurance portal.

This package provides the decision core consumed by the claims-processing
workflow: a prioritised eligibility rule chain, a coverage resolver that
applies benefit policy rules to claim lines, and the claim status state
machine.
"""

__version__ = "0.1.0"
__author__ = "TPA Platform"
