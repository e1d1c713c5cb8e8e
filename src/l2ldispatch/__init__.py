"""l2ldispatch : client de démonstration pour l'API Dispatch."""

__version__ = "0.1.0"
