# tests/conftest.py
from __future__ import annotations

import numpy as np
import pytest
from loguru import logger

from plsa_em.dataset import Dataset


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def two_docs() -> Dataset:
    """
    M=2, V=3
      doc0 = [(0, 2.0), (1, 1.0)]
      doc1 = [(1, 1.0), (2, 3.0)]
    """
    return Dataset.from_documents([
        [(0, 2.0), (1, 1.0)],
        [(1, 1.0), (2, 3.0)],
    ])


@pytest.fixture
def random_docs() -> Dataset:
    """12 documents over 15 dimensions, strictly positive weights."""
    rng = np.random.default_rng(7)
    docs = []
    for _ in range(12):
        n = int(rng.integers(3, 9))
        dims = rng.choice(15, size=n, replace=False)
        docs.append([(int(d), float(w)) for d, w in zip(dims, rng.uniform(0.5, 3.0, size=n))])
    return Dataset.from_documents(docs, vocab_size=15)

