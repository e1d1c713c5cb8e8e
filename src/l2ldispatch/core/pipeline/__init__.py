"""Pipeline : étapes, contexte et runner."""
