"""
Coverage resolution and claim coverage computation.
"""

from tpa_engine.coverage.resolver import CoverageResolver

__all__ = ["CoverageResolver"]
