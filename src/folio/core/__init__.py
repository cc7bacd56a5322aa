"""
Core numeric primitives, structured errors, and serialization contracts.

This package is independent of the document evaluator and of plugins;
they build on top of it.
"""
