"""Catalog persistence: domains, agents, questions, answers and their variants."""

from agent_demo.services.catalog.catalog_repository import CatalogRepository

__all__ = ["CatalogRepository"]
