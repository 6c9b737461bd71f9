"""YAML feature specs executed in a browser through Playwright."""

__version__ = "0.1.0"
