"""Citizen waste-reporting API."""

__all__ = []
