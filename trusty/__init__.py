"""trusty: multi-tenant authorization and identity administration."""

__version__ = "0.1.0"
