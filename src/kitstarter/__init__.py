"""kitstarter - SvelteKit monorepo project generator.

Copies a bundled project template, substitutes the project's names into it,
and optionally installs dependencies and initializes a git repository.
"""

# Version information
__version__ = "0.1.0"

__all__ = ["__version__"]
