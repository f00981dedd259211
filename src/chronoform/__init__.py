"""chronoform — time-derived values with rotation, expiry and plan/apply."""

__version__ = "0.3.0"
