"""
Configuration for the dependency graph engine
Thresholds and markers are read from the environment (or a .env file)
"""

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Default thresholds and markers used by the analyzers"""
    # Cycles longer than this (closing node included) are reported as errors
    CYCLE_ERROR_THRESHOLD = int(os.getenv("DEPGRAPH_CYCLE_ERROR_THRESHOLD", "5"))

    # Tree projection depth bound
    TREE_MAX_DEPTH = int(os.getenv("DEPGRAPH_TREE_MAX_DEPTH", "20"))

    # Path substring that marks third-party package directories
    DEPENDENCY_DIR_MARKER = os.getenv("DEPGRAPH_DEPENDENCY_DIR_MARKER", "node_modules")

    # Depth bound for path enumeration between two nodes
    PATH_SEARCH_MAX_DEPTH = int(os.getenv("DEPGRAPH_PATH_SEARCH_MAX_DEPTH", "10"))

    UNKNOWN_VERSION = "unknown"
