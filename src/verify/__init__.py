"""Verification of generated output."""
