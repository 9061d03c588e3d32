"""Ads targeting intelligence: website analysis and ad audience recommendations."""

__version__ = "1.0.0"
