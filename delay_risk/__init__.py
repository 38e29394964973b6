"""
Flight Delay Risk Scoring Package

Contains all source modules for the delay risk scoring engine:
- knowledge/: Static lookup tables (airlines, airports, time of day, seasons)
- scoring/: Factor evaluation, scoring, insights, batch aggregation, feedback
- schemas.py: Input and output data model
- utils/: Logging helpers
"""

__version__ = "1.0.0"
