"""
Libs Layer - Pluggable collaborators of the loader façade.

This package contains:
- hooks: caller hook set and its async resolution
- registry: explicit module registry
- engine: loading engine contract, default engine and factory
"""
