"""Configuration du logging pour l'application."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "l2ldispatch"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_OWNED_ATTR = "_l2ldispatch_owned"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure le logger de l'app et retourne le logger 'l2ldispatch'.

    Args:
        level: Niveau de log ; DEBUG journalise les réponses complètes de l'API.
        log_file: Fichier où écrire les logs (optionnel).
        format_string: Format des messages (optionnel).
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Éviter double handlers si rappel
    for h in list(logger.handlers):
        if getattr(h, _OWNED_ATTR, False):
            logger.removeHandler(h)
            h.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        logger.addHandler(handler)
    return logger
