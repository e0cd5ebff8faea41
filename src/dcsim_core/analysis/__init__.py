# src/dcsim_core/analysis/__init__.py
from .topology import TopologyAnalyzer
from .results import TopologyAnalysisResults
from .exceptions import TopologyAnalysisError

__all__ = [
    "TopologyAnalyzer",
    "TopologyAnalysisResults",
    "TopologyAnalysisError",
]
