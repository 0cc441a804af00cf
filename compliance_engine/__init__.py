"""
Space Compliance Engine

Core rule engines for EU Space Act / NIS2 compliance tracking: a generic
workflow transition engine, a regulatory compliance evaluator, and a cron
schedule calculator for recurring reports.
"""

__version__ = "1.0.0"
