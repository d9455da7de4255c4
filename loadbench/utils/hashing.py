"""Deterministic hashing for fixture fingerprinting."""

import hashlib
import json
from typing import Dict


def compute_dataset_hash(dataset: Dict[str, str]) -> str:
    """Compute deterministic SHA256 hash of a dataset's contents.

    Two fixtures in different forms hash equal when they hold the same
    mapping, which is how fixture sets are checked for consistency.

    Args:
        dataset: Key/value mapping

    Returns:
        Hex string of SHA256 hash
    """
    # Create deterministic JSON (sorted keys)
    json_str = json.dumps(dataset, sort_keys=True, ensure_ascii=True)

    return hashlib.sha256(json_str.encode('utf-8')).hexdigest()


def compute_file_hash(path: str, chunk_size: int = 8192) -> str:
    """Compute SHA256 hash of a file's raw bytes.

    Args:
        path: Path to file
        chunk_size: Read size per chunk

    Returns:
        Hex string of SHA256 hash
    """
    hasher = hashlib.sha256()

    with open(path, 'rb') as f:
        # Read in chunks to handle large files
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)

    return hasher.hexdigest()
