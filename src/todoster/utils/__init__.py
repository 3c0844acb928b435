"""Utility helpers for Todoster."""
