"""TechMart storefront core: cart state engine and access control."""

__version__ = "1.0.0"
