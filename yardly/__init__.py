"""Yardly marketplace backend."""
