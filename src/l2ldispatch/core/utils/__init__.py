"""Utilitaires (dates API, logging)."""
