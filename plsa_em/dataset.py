"""
dataset.py
----------
Sparse weighted document collections and their loaders.

A Dataset stores every document's (dimension, weight) occurrences in three
flat arrays:

  dims[n], weights[n]   occurrence n, grouped by document
  offsets[m]            first occurrence of document m (offsets[M] == n_total)

so a document's positions are ``range(offsets[m+1] - offsets[m])`` and the
posterior arena in ParameterStore can reuse the same offsets.
"""

from __future__ import annotations

import os
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.datasets import load_svmlight_file
from sklearn.feature_extraction.text import CountVectorizer

from .config import SVMLIGHT_ZERO_BASED, CSV_DOC_COL, CSV_DIM_COL, CSV_WEIGHT_COL
from .errors import DatasetError


class Feature(NamedTuple):
    dim: int
    weight: float


class Dataset:
    """Immutable collection of M documents over a vocabulary of size V."""

    def __init__(self, dims, weights, offsets, vocab_size: Optional[int] = None):
        dims = np.asarray(dims)
        weights = np.array(weights, dtype=np.float64)
        offsets = np.array(offsets, dtype=np.int64)

        if offsets.ndim != 1 or offsets.size == 0 or offsets[0] != 0:
            raise DatasetError("offsets must be a 1-D array starting at 0")
        if np.any(np.diff(offsets) < 0):
            raise DatasetError("offsets must be non-decreasing")
        if dims.shape != weights.shape or dims.ndim != 1 or dims.size != offsets[-1]:
            raise DatasetError(
                f"dims/weights must be 1-D with {int(offsets[-1])} entries, "
                f"got {dims.shape} and {weights.shape}"
            )
        if dims.size and not np.issubdtype(dims.dtype, np.integer):
            if not np.all(np.equal(np.mod(dims, 1), 0)):
                raise DatasetError("dimensions must be integers")
        dims = dims.astype(np.int64)
        if np.any(dims < 0):
            raise DatasetError("dimensions must be >= 0")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            raise DatasetError("weights must be finite and >= 0")

        if vocab_size is None:
            vocab_size = int(dims.max()) + 1 if dims.size else 0
        if vocab_size < 0:
            raise DatasetError(f"vocab_size must be >= 0, got {vocab_size}")

        self.dims = dims
        self.weights = weights
        self.offsets = offsets
        self.vocab_size = int(vocab_size)
        # document index of every occurrence, used to gather P(d|z) per occurrence
        self.doc_ids = np.repeat(np.arange(offsets.size - 1, dtype=np.int64), np.diff(offsets))

        for arr in (self.dims, self.weights, self.offsets, self.doc_ids):
            arr.flags.writeable = False

    # -----------------------------------------------------------
    #  Constructors
    # -----------------------------------------------------------
    @classmethod
    def from_documents(cls, docs: Iterable[Iterable[Tuple[int, float]]], vocab_size: Optional[int] = None) -> "Dataset":
        """Build from an iterable of documents, each a sequence of (dim, weight)."""
        dims: List[int] = []
        weights: List[float] = []
        offsets = [0]
        for doc in docs:
            for dim, weight in doc:
                dims.append(dim)
                weights.append(weight)
            offsets.append(len(dims))
        return cls(np.asarray(dims, dtype=np.int64), weights, offsets, vocab_size=vocab_size)

    @classmethod
    def from_csr(cls, matrix, vocab_size: Optional[int] = None) -> "Dataset":
        """Build from a (n_docs, n_features) CSR matrix; stored entries become occurrences."""
        X = matrix.tocsr()
        if vocab_size is None:
            vocab_size = X.shape[1]
        return cls(X.indices.copy(), X.data.copy(), X.indptr.copy(), vocab_size=vocab_size)

    @classmethod
    def from_tokens(cls, token_docs: Sequence[Sequence[str]]) -> Tuple["Dataset", np.ndarray]:
        """Count tokens per document with CountVectorizer; returns (dataset, vocab)."""
        vectorizer = CountVectorizer(tokenizer=lambda x: x, preprocessor=lambda x: x,
                                     lowercase=False, token_pattern=None)
        try:
            X = vectorizer.fit_transform(token_docs)  # (D, V)
        except ValueError as e:
            # raised for an empty vocabulary
            raise DatasetError(f"cannot build vocabulary: {e}") from e
        return cls.from_csr(X), vectorizer.get_feature_names_out()

    # -----------------------------------------------------------
    #  Accessors
    # -----------------------------------------------------------
    def __len__(self) -> int:
        return self.offsets.size - 1

    @property
    def n_docs(self) -> int:
        return len(self)

    @property
    def n_occurrences(self) -> int:
        return int(self.offsets[-1])

    def doc_length(self, m: int) -> int:
        return int(self.offsets[m + 1] - self.offsets[m])

    def document(self, m: int) -> List[Feature]:
        lo, hi = self.offsets[m], self.offsets[m + 1]
        return [Feature(int(d), float(w)) for d, w in zip(self.dims[lo:hi], self.weights[lo:hi])]

    def feature_at(self, m: int, position: int) -> Feature:
        if not 0 <= position < self.doc_length(m):
            raise IndexError(f"position {position} out of range for document {m}")
        n = self.offsets[m] + position
        return Feature(int(self.dims[n]), float(self.weights[n]))

    def __repr__(self) -> str:
        return f"Dataset(n_docs={self.n_docs}, vocab_size={self.vocab_size}, n_occurrences={self.n_occurrences})"


# -----------------------------------------------------------
#  File loaders
# -----------------------------------------------------------
def load_svmlight(path: str, zero_based=SVMLIGHT_ZERO_BASED) -> Dataset:
    """
    Load the sparse "label dim:weight dim:weight ..." format; labels are ignored.

    Dimensions are read as zero-based by default. With ``zero_based="auto"``
    sklearn treats a file that never uses index 0 as one-based and shifts every
    dimension down by one.
    """
    try:
        X, _ = load_svmlight_file(path, zero_based=zero_based)
    except (ValueError, OSError) as e:
        raise DatasetError(f"cannot parse svmlight file {path}: {e}") from e
    return Dataset.from_csr(X)


def load_triples_csv(path: str) -> Dataset:
    """
    Load a CSV of one occurrence per row with columns doc, dim, weight.
    Positions follow file order within each document; document ids without
    rows become empty documents.
    """
    try:
        df = pd.read_csv(path)
    except (ValueError, OSError, pd.errors.ParserError) as e:
        raise DatasetError(f"cannot parse CSV file {path}: {e}") from e

    missing = [c for c in (CSV_DOC_COL, CSV_DIM_COL, CSV_WEIGHT_COL) if c not in df.columns]
    if missing:
        raise DatasetError(f"CSV must contain columns {missing}")
    if df.empty:
        return Dataset([], [], [0])

    docs = pd.to_numeric(df[CSV_DOC_COL], errors="coerce")
    if docs.isna().any() or (docs < 0).any() or not np.all(np.isfinite(docs)) or (np.mod(docs, 1) != 0).any():
        raise DatasetError(f"column '{CSV_DOC_COL}' must hold non-negative integers")

    # stable sort keeps file order as the position order inside a document
    order = np.argsort(docs.to_numpy(dtype=np.int64), kind="stable")
    doc_ids = docs.to_numpy(dtype=np.int64)[order]
    dims = pd.to_numeric(df[CSV_DIM_COL], errors="coerce").to_numpy()[order]
    weights = pd.to_numeric(df[CSV_WEIGHT_COL], errors="coerce").to_numpy(dtype=np.float64)[order]
    if np.isnan(dims).any():
        raise DatasetError(f"column '{CSV_DIM_COL}' must hold integers")

    counts = np.bincount(doc_ids, minlength=int(doc_ids.max()) + 1)
    offsets = np.concatenate(([0], np.cumsum(counts)))
    return Dataset(dims, weights, offsets)


def load_dataset(source: str) -> Dataset:
    """Load a dataset file by suffix (.csv triples, anything else svmlight)."""
    if not source or not os.path.exists(source):
        raise DatasetError(f"datafile: {source} doesn't exist")
    if os.path.isdir(source):
        raise DatasetError(f"datafile: {source} is a directory")

    if source.lower().endswith(".csv"):
        dataset = load_triples_csv(source)
    else:
        dataset = load_svmlight(source)

    if dataset.n_docs == 0:
        raise DatasetError(f"datafile: {source} holds no documents")
    return dataset
