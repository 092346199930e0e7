"""
Centrality Calculator
Ranks modules by how many other modules depend on them
"""

import logging
from typing import Dict, List, Optional, Tuple

from .graph_model import GraphModel

logger = logging.getLogger(__name__)


class CentralityCalculator:
    """In-degree as a naive proxy for how depended-upon a module is

    Only meant for relative ranking in reports; this is not betweenness or
    eigenvector centrality.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def calculate(self, model: GraphModel) -> Dict[str, int]:
        scores = {node_id: model.in_degree(node_id) for node_id in model.node_ids}
        self.logger.debug(f"Calculated in-degree centrality for {len(scores)} modules")
        return scores

    def rank(self, model: GraphModel, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """Modules by score, highest first; ties keep node order"""
        ranking = sorted(self.calculate(model).items(), key=lambda item: item[1], reverse=True)
        return ranking if limit is None else ranking[:limit]
