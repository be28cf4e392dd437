"""Shared utilities for the kitstarter scaffolder.

Modules:
    config: YAML configuration builder and resolved settings
    logger: Rich component loggers
    naming: Project name validation and identifier derivation
    file_tree: Template tree traversal with an inclusion policy
    commands: Child process execution behind a runner interface
"""
