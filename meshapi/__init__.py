"""Service mesh API resource models, conditions, Helm values and extension conversion."""

__version__ = "0.1.0"