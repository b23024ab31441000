"""Graph-backed persistence for recipes, ingredients and foods."""

__version__ = "0.1.0"
