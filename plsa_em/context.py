from __future__ import annotations

from dataclasses import dataclass

from .dataset import Dataset
from .inverted_index import InvertedIndex, build_inverted_index


@dataclass(frozen=True)
class TrainingContext:
    """Read-only inputs shared by every EM stage."""

    dataset: Dataset
    index: InvertedIndex
    n_topics: int
    n_jobs: int = 1

    @classmethod
    def from_dataset(cls, dataset: Dataset, n_topics: int, n_jobs: int = 1) -> "TrainingContext":
        return cls(dataset=dataset, index=build_inverted_index(dataset), n_topics=n_topics, n_jobs=n_jobs)

    @property
    def n_docs(self) -> int:
        return self.dataset.n_docs

    @property
    def vocab_size(self) -> int:
        return self.dataset.vocab_size
