"""Utility helpers for ternary_boehm."""
