"""Implementaciones concretas de los puertos del dominio."""
