"""
Identifier reference graph and component analysis.
"""

from .dependency_graph import DependencyGraph
from .components import strongly_connected_components, weakly_connected_components

__all__ = [
    "DependencyGraph",
    "strongly_connected_components",
    "weakly_connected_components",
]
