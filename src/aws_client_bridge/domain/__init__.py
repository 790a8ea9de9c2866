"""Naming rules and operation descriptors."""
