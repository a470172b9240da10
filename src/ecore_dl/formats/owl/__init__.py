"""OWL output: textual rendering and RDF graph construction."""

from .graph_builder import AxiomGraphBuilder
from .renderer import DLRenderer, ManchesterRenderer, render_axioms, render_dl, render_manchester

__all__ = [
    "AxiomGraphBuilder",
    "DLRenderer",
    "ManchesterRenderer",
    "render_axioms",
    "render_dl",
    "render_manchester",
]
