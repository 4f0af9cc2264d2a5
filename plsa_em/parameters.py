from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .context import TrainingContext
from .errors import InvalidParameters


@dataclass
class ParameterStore:
    """
    The PLSA probability tables, mutated in place by every EM iteration.

    topic_prior       (K,)    P(z)
    doc_given_topic   (K, M)  P(d|z)
    word_given_topic  (K, V)  P(w|z)
    posterior         (K, N)  P(z|d,w) per occurrence; document m owns
                              columns offsets[m]:offsets[m+1]
    """

    topic_prior: np.ndarray
    doc_given_topic: np.ndarray
    word_given_topic: np.ndarray
    posterior: np.ndarray
    offsets: np.ndarray

    @property
    def n_topics(self) -> int:
        return self.topic_prior.shape[0]

    def posterior_for(self, m: int) -> np.ndarray:
        """View of the (K, doc_length) posterior slice of document m."""
        return self.posterior[:, self.offsets[m]:self.offsets[m + 1]]

    def copy(self) -> "ParameterStore":
        return ParameterStore(
            self.topic_prior.copy(),
            self.doc_given_topic.copy(),
            self.word_given_topic.copy(),
            self.posterior.copy(),
            self.offsets,
        )


def _random_rows(rng: np.random.Generator, shape) -> np.ndarray:
    # 1 - U[0, 1) is U(0, 1], so no row can sum to zero
    rows = 1.0 - rng.random(shape)
    rows /= rows.sum(axis=1, keepdims=True)
    return rows


def initialize(ctx: TrainingContext, rng: np.random.Generator) -> ParameterStore:
    """Uniform P(z), random row-normalized P(d|z) and P(w|z), unfilled posterior."""
    K, M, V = ctx.n_topics, ctx.n_docs, ctx.vocab_size
    if K < 1:
        raise InvalidParameters(f"number of topics must be >= 1, got {K}")
    if V == 0:
        raise InvalidParameters("vocabulary is empty")
    if M == 0:
        raise InvalidParameters("dataset has no documents")

    topic_prior = np.full(K, 1.0 / K)
    doc_given_topic = _random_rows(rng, (K, M))
    word_given_topic = _random_rows(rng, (K, V))
    # E-step fills every entry before the M-step reads it
    posterior = np.empty((K, ctx.dataset.n_occurrences))

    return ParameterStore(topic_prior, doc_given_topic, word_given_topic, posterior, ctx.dataset.offsets)
