"""
Flight Delay Risk Scoring Configuration Package

This package contains the configuration module for the scoring engine:
- scoring_config.py: Knowledge tables, factor weights, thresholds, batch settings
"""

__version__ = "1.0.0"
