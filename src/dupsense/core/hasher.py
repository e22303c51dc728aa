"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements full-content hashing with pluggable hash algorithms.

Files are streamed in fixed-size chunks so memory use does not grow with file size.
"""

import hashlib
import logging
import os
import stat
from typing import Dict, Type

import xxhash

from dupsense.core.errors import HashError
from dupsense.core.interfaces import Hasher, HashAlgorithm, IncrementalHash
from dupsense.core.models import FileRecord, HashAlgorithmName

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024  # 1MB per read


# Use the same way to implement and use any other hashing algorithm
class XXH128AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.XXH128.value

    def new(self) -> IncrementalHash:
        return xxhash.xxh3_128()


class MD5AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.MD5.value

    def new(self) -> IncrementalHash:
        return hashlib.md5()


class SHA256AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.SHA256.value

    def new(self) -> IncrementalHash:
        return hashlib.sha256()


ALGORITHMS: Dict[HashAlgorithmName, Type[HashAlgorithm]] = {
    HashAlgorithmName.XXH128: XXH128AlgorithmImpl,
    HashAlgorithmName.MD5: MD5AlgorithmImpl,
    HashAlgorithmName.SHA256: SHA256AlgorithmImpl,
}


def algorithm_for(name: HashAlgorithmName) -> HashAlgorithm:
    return ALGORITHMS[name]()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes the digest of the whole file content.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = READ_CHUNK_SIZE):
        self.algorithm = algorithm or XXH128AlgorithmImpl()
        self.chunk_size = chunk_size

    def compute_digest(self, file: FileRecord) -> str:
        """
        Returns the hex digest of the file content.

        Raises:
            HashError: if the file cannot be opened or read, or is no longer a
                regular file (a FIFO swapped in after the scan would block the read).
        """
        digest = self.algorithm.new()
        try:
            if not stat.S_ISREG(os.stat(file.path, follow_symlinks=False).st_mode):
                raise HashError(file.path, ValueError("not a regular file"))
            with open(file.path, 'rb') as f:
                while True:
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    digest.update(chunk)
        except OSError as e:
            raise HashError(file.path, e) from e

        result = digest.hexdigest()
        logger.debug(f"{self.algorithm.name} {result} {file.relative_path}")
        return result
