"""Loader strategies and the strategy registry.

A strategy is a named function from a fixture path to a freshly built
``Dict[str, str]``. Strategies never cache: every call reads and parses the
file again, because the harness measures cold per-call load cost.
"""

import ast
import json
import marshal
import pickle
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

import regex as re

from loadbench.core.errors import (
    HarnessError,
    LoadError,
    NotFoundError,
    UnknownStrategyError,
)
from loadbench.core.fixtures import FixtureForm
from loadbench.core.io import MAGIC, TSV_HEADER

Dataset = Dict[str, str]
Loader = Callable[[Path], object]

_TSV_ESCAPE_RE = re.compile(r"\\(?:u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8})|([\\tnr]))")
_TSV_UNESCAPES = {"\\": "\\", "t": "\t", "n": "\n", "r": "\r"}
_NO_BUILTINS = {"__builtins__": {}}


@dataclass(frozen=True)
class Strategy:
    """A named loading algorithm for one fixture form."""

    name: str
    form: FixtureForm
    loader: Loader = field(repr=False, compare=False)
    description: str = ""

    def load(self, path: Union[str, Path]) -> Dataset:
        """Load ``path`` into a new dataset.

        Raises:
            NotFoundError: If the fixture does not exist
            LoadError: If reading or parsing fails, or the result is not a
                mapping of strings to strings
        """
        path = Path(path)
        if not path.is_file():
            raise NotFoundError(path)

        try:
            data = self.loader(path)
        except HarnessError:
            raise
        except FileNotFoundError as exc:
            raise NotFoundError(path) from exc
        except Exception as exc:
            raise LoadError(self.name, path, f"{type(exc).__name__}: {exc}") from exc

        return _validate(self.name, path, data)


def _validate(name: str, path: Path, data: object) -> Dataset:
    if not isinstance(data, dict):
        raise LoadError(name, path, f"expected a mapping, got {type(data).__name__}")
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise LoadError(
                name, path,
                f"entry {key!r} is {type(key).__name__} -> {type(value).__name__}, "
                f"expected str -> str",
            )
    return data


# --- built-in loaders -----------------------------------------------------

def load_json(path: Path) -> object:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_json_ascii(path: Path) -> object:
    with open(path, 'r', encoding='ascii') as f:
        return json.load(f)


def load_literal(path: Path) -> object:
    # Parsing from bytes lets the coding cookie pick the source encoding.
    tree = ast.parse(path.read_bytes(), filename=str(path), mode="eval")
    return ast.literal_eval(tree)


def load_source(path: Path) -> object:
    code = compile(path.read_bytes(), str(path), "eval")
    return eval(code, dict(_NO_BUILTINS))


def load_bytecode(path: Path) -> object:
    data = path.read_bytes()
    if data[:len(MAGIC)] != MAGIC:
        raise ValueError(
            f"bad magic number {data[:len(MAGIC)].hex()}, expected {MAGIC.hex()} "
            f"(fixture compiled by another interpreter version)"
        )
    code = marshal.loads(data[len(MAGIC):])
    return eval(code, dict(_NO_BUILTINS))


def load_pickle(path: Path) -> object:
    with open(path, 'rb') as f:
        return pickle.load(f)


def _unescape_tsv(text: str) -> str:
    def _replace(match) -> str:
        short, long_, simple = match.groups()
        if simple is not None:
            return _TSV_UNESCAPES[simple]
        return chr(int(short or long_, 16))

    return _TSV_ESCAPE_RE.sub(_replace, text)


def load_tsv(path: Path) -> object:
    dataset = {}
    with open(path, 'r', encoding='latin-1', newline='\n') as f:
        header = f.readline().rstrip("\n")
        if header != TSV_HEADER:
            raise ValueError(f"missing header line {TSV_HEADER!r}")
        for lineno, line in enumerate(f, start=2):
            line = line.rstrip("\n")
            if not line:
                continue
            parts = line.split("\t")
            if len(parts) != 2:
                raise ValueError(f"line {lineno}: expected 2 tab-separated fields, got {len(parts)}")
            dataset[_unescape_tsv(parts[0])] = _unescape_tsv(parts[1])
    return dataset


# --- registry -------------------------------------------------------------

class StrategyRegistry:
    """Ordered name -> strategy mapping. Order is reporting order."""

    def __init__(self) -> None:
        self._strategies: Dict[str, Strategy] = {}
        self._frozen = False

    def register(self, strategy: Strategy) -> Strategy:
        if self._frozen:
            raise RuntimeError("Strategy registry is frozen")
        if strategy.name in self._strategies:
            raise ValueError(f"Strategy already registered: {strategy.name}")
        self._strategies[strategy.name] = strategy
        return strategy

    def add(
        self,
        name: str,
        form: Union[FixtureForm, str],
        description: str = "",
    ) -> Callable[[Loader], Loader]:
        """Decorator form of :meth:`register`."""
        def decorator(loader: Loader) -> Loader:
            self.register(Strategy(name, FixtureForm(form), loader, description))
            return loader
        return decorator

    def freeze(self) -> "StrategyRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Strategy:
        try:
            return self._strategies[name]
        except KeyError:
            raise UnknownStrategyError(name, self._strategies) from None

    def select(self, names: Optional[Iterable[str]] = None) -> List[Strategy]:
        """Return the named strategies in the given order, or all of them."""
        if not names:
            return list(self._strategies.values())
        return [self.get(name) for name in names]

    @property
    def names(self) -> List[str]:
        return list(self._strategies)

    def __iter__(self) -> Iterator[Strategy]:
        return iter(list(self._strategies.values()))

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, name: str) -> bool:
        return name in self._strategies


def build_default_registry() -> StrategyRegistry:
    registry = StrategyRegistry()
    registry.register(Strategy("json", FixtureForm.JSON, load_json, "json.load of UTF-8 JSON"))
    registry.register(Strategy(
        "json-ascii", FixtureForm.JSON_ASCII, load_json_ascii, "json.load of \\u-escaped ASCII JSON"
    ))
    registry.register(Strategy(
        "literal", FixtureForm.LITERAL, load_literal, "ast.literal_eval of a UTF-8 dict display"
    ))
    registry.register(Strategy(
        "literal-latin1", FixtureForm.LITERAL_LATIN1, load_literal,
        "ast.literal_eval of a Latin-1 dict display",
    ))
    registry.register(Strategy(
        "source", FixtureForm.LITERAL, load_source, "compile and eval the source on every call"
    ))
    registry.register(Strategy(
        "bytecode", FixtureForm.BYTECODE, load_bytecode, "eval of a code object compiled ahead of time"
    ))
    registry.register(Strategy("pickle", FixtureForm.PICKLE, load_pickle, "pickle.load"))
    registry.register(Strategy(
        "tsv-latin1", FixtureForm.TSV_LATIN1, load_tsv, "Latin-1 tab-separated lines with escapes"
    ))
    return registry


DEFAULT_REGISTRY = build_default_registry().freeze()
