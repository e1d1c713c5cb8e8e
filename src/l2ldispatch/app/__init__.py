"""Point d'entrée en ligne de commande."""
