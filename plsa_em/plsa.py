import numpy as np
from typing import List, Optional, Sequence

from .config import PLSA_TOPICS, PLSA_MAX_ITERS, RANDOM_STATE, N_JOBS, TOP_WORDS
from .dataset import Dataset
from .trainer import train, log_reporter


class PLSA:
    def __init__(self, n_topics=PLSA_TOPICS, max_iter=PLSA_MAX_ITERS, random_state=RANDOM_STATE,
                 n_jobs=N_JOBS, reporter=log_reporter):
        self.n_topics = n_topics
        self.max_iter = max_iter
        self.random_state = random_state
        self.n_jobs = n_jobs
        self.reporter = reporter
        self.P_z = None
        self.P_d_z = None
        self.P_w_z = None
        self.history_ = None
        self.vocab = None
        self.result_ = None

    def fit(self, dataset: Dataset, vocab: Optional[Sequence[str]] = None):
        if vocab is not None and len(vocab) != dataset.vocab_size:
            raise ValueError(f"vocab has {len(vocab)} terms but dataset vocab_size is {dataset.vocab_size}")
        result = train(dataset, self.n_topics, self.max_iter, random_seed=self.random_state,
                       reporter=self.reporter, n_jobs=self.n_jobs)
        self.result_ = result
        self.P_z = result.topic_prior          # (Z,)
        self.P_d_z = result.doc_given_topic    # (Z, D)
        self.P_w_z = result.word_given_topic   # (Z, V)
        self.history_ = result.log_likelihoods
        self.vocab = np.asarray(vocab) if vocab is not None else None
        return self

    def fit_tokens(self, docs: Sequence[Sequence[str]]):
        dataset, vocab = Dataset.from_tokens(docs)
        return self.fit(dataset, vocab=vocab)

    def transform(self) -> np.ndarray:
        """P(z|d) for the training documents, shape (D, Z); empty documents get a zero row."""
        joint = self.P_z[:, None] * self.P_d_z  # (Z, D)
        norm = joint.sum(axis=0, keepdims=True)
        out = np.divide(joint, norm, out=np.zeros_like(joint), where=norm > 0)
        return out.T

    def top_words(self, n: int = TOP_WORDS) -> List[List[str]]:
        if self.vocab is None:
            raise ValueError("No vocabulary. Fit with fit_tokens() or pass vocab to fit().")
        order = np.argsort(-self.P_w_z, axis=1, kind="stable")[:, :n]
        return [[str(self.vocab[j]) for j in row] for row in order]
