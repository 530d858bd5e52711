"""Utility helpers for IronList."""
