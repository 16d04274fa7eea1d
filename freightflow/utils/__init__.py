"""Utility helpers shared across FreightFlow modules."""
