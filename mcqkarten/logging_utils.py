"""Einfache Logger-Konfiguration.

Stellt `get_logger` bereit, das sowohl im CLI als auch in Skripten für eine
einheitliche Log-Ausgabe sorgt. Die Logdateien liegen standardmäßig im
Unterordner ``.logs``; Ordner und Level lassen sich über die Umgebungsvariablen
``MCQKARTEN_LOG_DIR`` und ``MCQKARTEN_LOG_LEVEL`` anpassen.
"""

import datetime
import logging
import os
import pathlib


def get_logger(name: str = "mcqkarten") -> logging.Logger:
    """Return a module-specific logger configured once for the application."""

    # Configure root logger only once to avoid duplicate handlers
    if not logging.getLogger().handlers:
        log_dir = pathlib.Path(os.environ.get("MCQKARTEN_LOG_DIR", ".logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        logfile = log_dir / f"mcqkarten_{datetime.datetime.now().strftime('%Y%m%d')}.log"
        level = os.environ.get("MCQKARTEN_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            handlers=[
                logging.FileHandler(logfile, encoding="utf-8"),
                logging.StreamHandler(),
            ],
        )
    return logging.getLogger(name)
