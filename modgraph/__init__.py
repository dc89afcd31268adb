"""modgraph - module dependency graphs for TypeScript and JavaScript projects."""

__version__ = "0.1.0"
