"""Sonority: spatial sound emitters for entity-component-system games."""
