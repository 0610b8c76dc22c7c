"""Identity of a Yeoman generator."""

from __future__ import annotations

from dataclasses import dataclass

PACKAGE_PREFIX = "generator-"


@dataclass(frozen=True)
class GeneratorDescriptor:
    """A generator addressed by its bare name.

    ``name`` is what ``yo`` is invoked with (``webapp``, ``@scope/lib`` or
    ``webapp:component`` for a sub-generator). The npm package is derived from it
    by adding the ``generator-`` prefix.
    """

    name: str

    @classmethod
    def parse(cls, raw_name: str) -> GeneratorDescriptor:
        """Normalize user input, stripping a redundant ``generator-`` prefix.

        Raises:
            ValueError: If the name is empty.

        """
        name = raw_name.strip()
        scope, _, bare = name.rpartition("/")
        if bare.startswith(PACKAGE_PREFIX):
            bare = bare[len(PACKAGE_PREFIX) :]
        name = f"{scope}/{bare}" if scope else bare
        if not bare or bare.startswith(":"):
            raise ValueError("Generator name must not be empty")
        return cls(name=name)

    @property
    def base_name(self) -> str:
        """Name without any ``:subgenerator`` suffix."""
        return self.name.split(":", 1)[0]

    @property
    def package(self) -> str:
        """npm package providing the generator."""
        scope, _, bare = self.base_name.rpartition("/")
        package = f"{PACKAGE_PREFIX}{bare}"
        return f"{scope}/{package}" if scope else package

    @property
    def config_key(self) -> str:
        """Key under which the generator records its answers in ``.yo-rc.json``."""
        return self.package
