"""Translate PL/pgSQL functions into dbt Jinja macros."""
