"""Constantes partagées."""
