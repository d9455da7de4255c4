"""Fixture forms and the read-only fixture provider."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from loadbench.core.errors import NotFoundError

logger = logging.getLogger(__name__)


class FixtureForm(str, Enum):
    JSON = "json"
    JSON_ASCII = "json-ascii"
    LITERAL = "literal"
    LITERAL_LATIN1 = "literal-latin1"
    BYTECODE = "bytecode"
    PICKLE = "pickle"
    TSV_LATIN1 = "tsv-latin1"

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self]

    @property
    def encoding(self) -> Optional[str]:
        """Text encoding of the file, or None for binary forms."""
        return _ENCODINGS[self]

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> Optional["FixtureForm"]:
        """Guess the form from a file name, longest suffix first."""
        name = Path(path).name
        for form in sorted(cls, key=lambda f: len(f.suffix), reverse=True):
            if name.endswith(form.suffix) and len(name) > len(form.suffix):
                return form
        return None


_SUFFIXES = {
    FixtureForm.JSON: ".json",
    FixtureForm.JSON_ASCII: ".ascii.json",
    FixtureForm.LITERAL: ".py",
    FixtureForm.LITERAL_LATIN1: ".latin1.py",
    FixtureForm.BYTECODE: ".marshal",
    FixtureForm.PICKLE: ".pickle",
    FixtureForm.TSV_LATIN1: ".tsv",
}

_ENCODINGS = {
    FixtureForm.JSON: "utf-8",
    FixtureForm.JSON_ASCII: "ascii",
    FixtureForm.LITERAL: "utf-8",
    FixtureForm.LITERAL_LATIN1: "latin-1",
    FixtureForm.BYTECODE: None,
    FixtureForm.PICKLE: None,
    FixtureForm.TSV_LATIN1: "latin-1",
}


@dataclass(frozen=True)
class Fixture:
    """One on-disk representation of a dataset."""

    name: str
    path: Path
    form: FixtureForm

    @property
    def encoding(self) -> Optional[str]:
        return self.form.encoding

    @property
    def stem(self) -> str:
        return self.name[: -len(self.form.suffix)]


class FixtureProvider:
    """Resolves fixture names to absolute paths under a root directory.

    The provider never opens fixture files; it only checks that they exist.
    """

    def __init__(self, root: Union[str, Path, None] = None):
        self.root = Path(root or ".").resolve()

    def resolve(self, name: Union[str, Path]) -> Path:
        """Return the absolute path for ``name``.

        Raises:
            NotFoundError: If the file does not exist
        """
        candidate = Path(name)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        candidate = candidate.resolve()

        if not candidate.is_file():
            raise NotFoundError(candidate)
        return candidate

    def resolve_for(self, stem: str, strategy) -> Path:
        """Resolve the file of ``stem`` that ``strategy`` reads."""
        return self.resolve(f"{stem}{strategy.form.suffix}")

    def exists(self, name: Union[str, Path]) -> bool:
        """Whether ``name`` resolves to an existing file."""
        try:
            self.resolve(name)
        except NotFoundError:
            return False
        return True

    def discover(self) -> List[Fixture]:
        """List recognized fixtures under the root, sorted by name."""
        if not self.root.is_dir():
            return []

        fixtures = []
        for path in sorted(self.root.iterdir()):
            if not path.is_file():
                continue
            form = FixtureForm.from_path(path)
            if form is None:
                logger.debug("Skipping %s: unrecognized suffix", path.name)
                continue
            fixtures.append(Fixture(name=path.name, path=path, form=form))
        return fixtures
