"""Fixture serialization, synthetic datasets and inspection."""

import importlib.util
import json
import marshal
import pickle
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import regex as re

from loadbench.core.errors import NotFoundError
from loadbench.core.fixtures import Fixture, FixtureForm
from loadbench.utils.hashing import compute_file_hash

MAGIC = importlib.util.MAGIC_NUMBER
TSV_HEADER = "# loadbench tsv-latin1"

# Words mixing ASCII with Latin-1 and non-Latin-1 characters, so every
# encoding-bearing form has something to encode.
WORDS = [
    "alpha", "bravo", "charlie", "delta", "echo", "foxtrot",
    "café", "naïve", "façade", "smörgåsbord", "über", "jalapeño",
    "€uro", "日本語", "Ωmega", "tab\there", "line\nbreak", "back\\slash",
]

_TSV_SPECIAL = re.compile(r"[\\\t\n\r]|[^\x00-\xff]")
_TSV_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}


def make_dataset(size: int, seed: int = 42, key_prefix: str = "key") -> Dict[str, str]:
    """Build a deterministic synthetic dataset.

    Args:
        size: Number of entries
        seed: Random seed
        key_prefix: Prefix for generated keys

    Returns:
        Mapping of ``{prefix}-{index}`` keys to short phrases
    """
    if size < 0:
        raise ValueError(f"Dataset size must be non-negative, got {size}")

    rng = np.random.default_rng(seed)
    dataset = {}
    for i in range(size):
        n_words = int(rng.integers(2, 6))
        picks = rng.choice(len(WORDS), size=n_words)
        dataset[f"{key_prefix}-{i:05d}"] = " ".join(WORDS[j] for j in picks)
    return dataset


def render_literal(dataset: Dict[str, str], encoding: str = "utf-8") -> str:
    """Render a dataset as Python source holding one dict display."""
    lines = [f"# -*- coding: {encoding} -*-", "{"]
    for key, value in dataset.items():
        lines.append(f"    {key!r}: {value!r},")
    lines.append("}")
    return "\n".join(lines) + "\n"


def escape_tsv(text: str) -> str:
    def _escape(match) -> str:
        char = match.group(0)
        if char in _TSV_ESCAPES:
            return _TSV_ESCAPES[char]
        code = ord(char)
        return f"\\u{code:04x}" if code <= 0xFFFF else f"\\U{code:08x}"

    return _TSV_SPECIAL.sub(_escape, text)


def _check_dataset(dataset: Dict[str, str]) -> None:
    for key, value in dataset.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError(
                f"Datasets map strings to strings, got {type(key).__name__} -> "
                f"{type(value).__name__} for {key!r}"
            )


def save_fixture(
    dataset: Dict[str, str],
    path: Union[str, Path],
    form: Union[FixtureForm, str],
) -> Fixture:
    """Write ``dataset`` to ``path`` in the given form.

    Args:
        dataset: Mapping of string keys to string values
        path: Output file path
        form: Fixture form to write

    Returns:
        The written fixture

    Raises:
        ValueError: If the dataset holds non-string keys or values
    """
    form = FixtureForm(form)
    _check_dataset(dataset)

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if form in (FixtureForm.JSON, FixtureForm.JSON_ASCII):
        ensure_ascii = form == FixtureForm.JSON_ASCII
        with open(output_path, 'w', encoding=form.encoding) as f:
            json.dump(dataset, f, ensure_ascii=ensure_ascii, indent=0)

    elif form in (FixtureForm.LITERAL, FixtureForm.LITERAL_LATIN1):
        source = render_literal(dataset, encoding=form.encoding)
        # Characters outside the declared encoding become \u escapes,
        # which stay valid inside a string literal.
        output_path.write_bytes(source.encode(form.encoding, errors="backslashreplace"))

    elif form == FixtureForm.BYTECODE:
        code = compile(render_literal(dataset), output_path.name, "eval")
        with open(output_path, 'wb') as f:
            f.write(MAGIC)
            marshal.dump(code, f)

    elif form == FixtureForm.PICKLE:
        with open(output_path, 'wb') as f:
            pickle.dump(dict(dataset), f, protocol=pickle.HIGHEST_PROTOCOL)

    elif form == FixtureForm.TSV_LATIN1:
        with open(output_path, 'w', encoding=form.encoding, newline='\n') as f:
            f.write(TSV_HEADER + "\n")
            for key, value in dataset.items():
                f.write(f"{escape_tsv(key)}\t{escape_tsv(value)}\n")

    return Fixture(name=output_path.name, path=output_path.resolve(), form=form)


def write_fixture_set(
    dataset: Dict[str, str],
    directory: Union[str, Path],
    stem: str,
    forms: Optional[Iterable[Union[FixtureForm, str]]] = None,
) -> List[Fixture]:
    """Write ``dataset`` once per form as ``directory/stem + suffix``."""
    directory = Path(directory)
    selected = [FixtureForm(f) for f in forms] if forms else list(FixtureForm)
    return [save_fixture(dataset, directory / f"{stem}{form.suffix}", form) for form in selected]


def get_fixture_info(path: Union[str, Path]) -> Dict[str, Any]:
    """Get fixture information without loading it.

    Args:
        path: Path to fixture file

    Returns:
        Dictionary with fixture metadata

    Raises:
        NotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)

    form = FixtureForm.from_path(path)
    info = {
        "name": path.name,
        "form": form.value if form else None,
        "encoding": form.encoding if form else None,
        "size_bytes": path.stat().st_size,
        "file_hash": compute_file_hash(str(path)),
    }

    if form == FixtureForm.BYTECODE:
        with open(path, 'rb') as f:
            info["magic_ok"] = f.read(len(MAGIC)) == MAGIC

    return info
