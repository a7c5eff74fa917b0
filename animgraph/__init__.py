"""animgraph: animation state graph <-> JSON conversion and validation."""

__version__ = "0.1.0"
