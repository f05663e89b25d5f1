"""Utility helpers for plpgsql-dbt."""
