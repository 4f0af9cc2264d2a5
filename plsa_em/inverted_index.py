from __future__ import annotations

from typing import List, NamedTuple

import numpy as np

from .dataset import Dataset
from .errors import DatasetError


class Posting(NamedTuple):
    doc: int       # document where the word occurs
    position: int  # position of the occurrence inside that document


class InvertedIndex:
    """
    For every vocabulary dimension w, the occurrences that reference it.

    Stored CSR-style: ``occurrences[indptr[w]:indptr[w+1]]`` are the flat
    occurrence ids (into Dataset.dims / weights / the posterior arena) of
    dimension w. Read-only once built.
    """

    def __init__(self, occurrences: np.ndarray, indptr: np.ndarray, dataset: Dataset):
        self.occurrences = occurrences
        self.indptr = indptr
        self.docs = dataset.doc_ids[occurrences]
        self.positions = occurrences - dataset.offsets[self.docs]
        for arr in (self.occurrences, self.indptr, self.docs, self.positions):
            arr.flags.writeable = False

    def __len__(self) -> int:
        return self.indptr.size - 1

    @property
    def total_postings(self) -> int:
        return int(self.indptr[-1])

    def lengths(self) -> np.ndarray:
        return np.diff(self.indptr)

    def postings(self, w: int) -> List[Posting]:
        lo, hi = self.indptr[w], self.indptr[w + 1]
        return [Posting(int(d), int(p)) for d, p in zip(self.docs[lo:hi], self.positions[lo:hi])]


def build_inverted_index(dataset: Dataset) -> InvertedIndex:
    """Index every (document, position) under its dimension; fails on dims >= V."""
    V = dataset.vocab_size
    dims = dataset.dims
    if dims.size and int(dims.max()) >= V:
        bad = int(np.argmax(dims >= V))
        m = int(dataset.doc_ids[bad])
        raise DatasetError(
            f"document {m} references dimension {int(dims[bad])} "
            f"outside vocabulary of size {V}"
        )

    # stable: each posting list is ordered by document, then position
    occurrences = np.argsort(dims, kind="stable").astype(np.int64)
    counts = np.bincount(dims, minlength=V)
    indptr = np.concatenate(([0], np.cumsum(counts))).astype(np.int64)
    return InvertedIndex(occurrences, indptr, dataset)
