"""Comma - a personal command bookmark manager."""
