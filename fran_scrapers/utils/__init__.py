"""Shared helpers for fran_scrapers."""
