"""Talent BMS: sales, post and product reporting for talent marketing."""

__version__ = "0.1.0"
