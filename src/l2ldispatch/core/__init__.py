"""Coeur : client API, modèles, pipeline et workflow de démonstration."""
