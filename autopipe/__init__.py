"""Building blocks for node-based automation pipelines: types, actions, an action factory and nodes."""

__version__ = "1.0.0"
__all__ = ["common", "action", "input_actions", "factory", "node"]