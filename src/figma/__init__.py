"""
Fetch stage: reads component metadata from the Figma REST API.
"""

from .client import FigmaClient
from .records import ComponentRecord, collect_tagged_components, component_url

__all__ = ["FigmaClient", "ComponentRecord", "collect_tagged_components", "component_url"]
