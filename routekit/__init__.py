"""Composable request filters for methods, paths, headers, hosts, reply headers and websockets."""

__version__ = "0.3.3"