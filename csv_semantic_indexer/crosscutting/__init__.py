"""Piezas transversales: configuración, logging, errores y timing."""
