"""Catalog, identity and money services shared by the cart and access engines."""
