"""Configuration package for Declutter."""
