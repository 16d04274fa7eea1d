"""Routing and edge synthesis algorithms."""
