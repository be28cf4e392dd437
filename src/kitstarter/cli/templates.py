"""Template management for project scaffolding.

This module provides the TemplateManager class which handles:
- Discovery of bundled templates in the kitstarter package
- Copying a template tree into a new project directory
- Substituting ``{{TOKEN}}`` placeholders with project identifiers
- Rewriting legacy brand identifiers left in template files
"""

import re
import shutil
from collections.abc import Mapping
from pathlib import Path

from kitstarter.errors import CopyError, SubstitutionError, TemplateNotFoundError
from kitstarter.utils.file_tree import list_files
from kitstarter.utils.logger import get_logger
from kitstarter.utils.naming import ProjectIdentifier

logger = get_logger("templates")

# Brand the template was extracted from; rewritten to the new project's names
LEGACY_SCOPE = "@riffcraft/"
LEGACY_WORD = "riffcraft"
LEGACY_WORD_CAPITALIZED = "Riffcraft"

_LEGACY_WORD_PATTERN = re.compile(rf"\b{LEGACY_WORD}\b")
_LEGACY_WORD_CAPITALIZED_PATTERN = re.compile(rf"\b{LEGACY_WORD_CAPITALIZED}\b")

# Never copied into a generated project
_COPY_IGNORE = frozenset({"__pycache__"})


def replace_tokens(content: str, variables: Mapping[str, str]) -> str:
    """Replace every literal ``{{KEY}}`` in ``content``. Unknown tokens are kept."""
    for key, value in variables.items():
        content = content.replace("{{" + key + "}}", value)
    return content


def rewrite_legacy_identifiers(content: str, kebab: str, title: str) -> str:
    """Rewrite the legacy package scope and brand words.

    Only whole words are rewritten, so ``riffcraft_db`` is left alone while
    ``riffcraft-web`` becomes ``<kebab>-web``.
    """
    content = content.replace(LEGACY_SCOPE, f"@{kebab}/")
    content = _LEGACY_WORD_PATTERN.sub(kebab, content)
    content = _LEGACY_WORD_CAPITALIZED_PATTERN.sub(title, content)
    return content


class TemplateManager:
    """Manages project templates and scaffolding.

    Attributes:
        template_root: Directory whose subdirectories are the available templates
    """

    def __init__(self, template_root: str | Path | None = None):
        """Initialize template manager.

        Args:
            template_root: Custom templates directory. Defaults to the templates
                bundled with the installed kitstarter package.
        """
        self.template_root = Path(template_root) if template_root else self._get_template_root()

    def _get_template_root(self) -> Path:
        """Get path to the bundled templates directory.

        Raises:
            TemplateNotFoundError: If the templates directory cannot be found
        """
        import kitstarter.templates

        template_path = Path(kitstarter.templates.__file__).parent
        if not template_path.is_dir():
            raise TemplateNotFoundError(
                "Could not locate the kitstarter templates directory. "
                "Ensure kitstarter is properly installed."
            )
        return template_path

    def list_templates(self) -> list[str]:
        """List available templates.

        Returns:
            Sorted template names (directory names under the template root)

        Examples:
            >>> TemplateManager().list_templates()
            ['sveltekit-monorepo']
        """
        if not self.template_root.is_dir():
            return []

        return sorted(
            d.name
            for d in self.template_root.iterdir()
            if d.is_dir() and not d.name.startswith(("_", "."))
        )

    def get_template_dir(self, template_name: str) -> Path:
        """Return the directory of ``template_name``.

        Raises:
            TemplateNotFoundError: If the template is unknown or its files are missing
        """
        available = self.list_templates()
        if template_name not in available:
            listing = ", ".join(available) if available else "none"
            raise TemplateNotFoundError(
                f"Template '{template_name}' not found. Available templates: {listing}"
            )
        return self.template_root / template_name

    def copy_template(self, source: Path, destination: Path) -> None:
        """Recursively copy ``source`` into ``destination``.

        Files are copied byte-for-byte with their metadata. Directories are
        created as needed. Cleanup of a partial destination is the caller's job.

        Raises:
            CopyError: If any directory or file cannot be copied
        """
        source = Path(source)
        destination = Path(destination)

        try:
            destination.mkdir(parents=True, exist_ok=True)
            items = sorted(source.iterdir())
        except OSError as e:
            raise CopyError(source, destination, e) from e

        for item in items:
            if item.name in _COPY_IGNORE:
                continue

            target = destination / item.name
            if item.is_dir() and not item.is_symlink():
                self.copy_template(item, target)
                continue

            try:
                shutil.copy2(item, target, follow_symlinks=False)
            except OSError as e:
                raise CopyError(item, target, e) from e

        logger.debug(f"Copied {source} -> {destination}")

    def substitute_variables(
        self,
        directory: Path,
        variables: Mapping[str, str],
        *,
        rewrite_legacy: bool = False,
    ) -> int:
        """Substitute tokens in every text file under ``directory``.

        Token substitution always runs before the legacy rewrite: the rewrite
        targets the destination identifiers, not the placeholder tokens.
        Files that cannot be read as UTF-8 text are skipped as binary.

        Args:
            directory: Root of the copied project
            variables: Token name to replacement mapping
            rewrite_legacy: Also rewrite legacy brand identifiers. Needs the
                ``PROJECT_NAME`` and ``PROJECT_NAME_TITLE`` variables.

        Returns:
            Number of files rewritten

        Raises:
            TraversalError: If a directory cannot be listed
            SubstitutionError: If a changed file cannot be written back
        """
        rewritten = 0
        for path in list_files(directory):
            try:
                # newline="" on both ends keeps the template's own line endings
                with open(path, encoding="utf-8", newline="") as f:
                    content = f.read()
            except (UnicodeDecodeError, OSError) as e:
                logger.debug(f"Skipping unreadable file {path}: {e}")
                continue

            if "\x00" in content:
                logger.debug(f"Skipping binary content in {path}")
                continue

            new_content = replace_tokens(content, variables)
            if rewrite_legacy:
                new_content = rewrite_legacy_identifiers(
                    new_content, variables["PROJECT_NAME"], variables["PROJECT_NAME_TITLE"]
                )

            if new_content == content:
                continue

            try:
                with open(path, "w", encoding="utf-8", newline="") as f:
                    f.write(new_content)
            except OSError as e:
                raise SubstitutionError(path, e) from e

            rewritten += 1

        logger.debug(f"Rewrote {rewritten} file(s) under {directory}")
        return rewritten

    def materialize(
        self,
        template_name: str,
        destination: Path,
        identifier: ProjectIdentifier,
        *,
        rewrite_legacy: bool = True,
    ) -> Path:
        """Copy a template and substitute it for ``identifier`` in one call.

        Unlike the bootstrapper this does not clean up on failure.

        Returns:
            The destination directory
        """
        source = self.get_template_dir(template_name)
        self.copy_template(source, destination)
        self.substitute_variables(
            destination, identifier.template_variables(), rewrite_legacy=rewrite_legacy
        )
        return destination
