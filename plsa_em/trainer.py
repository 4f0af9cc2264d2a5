# plsa_em/trainer.py
# -----------------------------------------------------------
# PLSA training orchestrator
# - Validates inputs before anything is allocated
# - Builds the inverted index once, initializes parameters once
# - Runs exactly n_iterations of E-step -> M-step -> log-likelihood
# - Emits one IterationRecord per iteration to a reporter callback
# - Numeric degeneracy is logged and flagged, never stops the run
# -----------------------------------------------------------

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np
from loguru import logger

from .config import RANDOM_STATE, N_JOBS
from .context import TrainingContext
from .dataset import Dataset, load_dataset
from .em import e_step, m_step, log_likelihood
from .errors import DatasetError, InvalidParameters, PLSAError
from .parameters import ParameterStore, initialize


@dataclass(frozen=True)
class IterationRecord:
    iteration: int
    log_likelihood: float
    degenerate: bool = False


Reporter = Callable[[IterationRecord], None]


def print_reporter(record: IterationRecord) -> None:
    print(f"[{record.iteration}]\tlikelihood: {record.log_likelihood}")


def log_reporter(record: IterationRecord) -> None:
    msg = f"[{record.iteration}] likelihood: {record.log_likelihood:.6f}"
    if record.degenerate:
        logger.warning(msg + " (degenerate)")
    else:
        logger.info(msg)


@dataclass
class TrainedParameters:
    params: ParameterStore
    history: List[IterationRecord] = field(default_factory=list)
    cancelled: bool = False

    @property
    def topic_prior(self) -> np.ndarray:
        return self.params.topic_prior

    @property
    def doc_given_topic(self) -> np.ndarray:
        return self.params.doc_given_topic

    @property
    def word_given_topic(self) -> np.ndarray:
        return self.params.word_given_topic

    @property
    def log_likelihoods(self) -> List[float]:
        return [r.log_likelihood for r in self.history]

    @property
    def degenerate(self) -> bool:
        return any(r.degenerate for r in self.history)


def train(
    dataset: Optional[Dataset],
    n_topics: int,
    n_iterations: int,
    random_seed=RANDOM_STATE,
    reporter: Optional[Reporter] = log_reporter,
    n_jobs: int = N_JOBS,
    stop_event: Optional[threading.Event] = None,
) -> TrainedParameters:
    """
    Fit PLSA by EM for a fixed number of iterations.

    ``random_seed`` is anything ``np.random.default_rng`` accepts (an int, None
    or a Generator). ``stop_event`` is checked between iterations; when set, the
    parameters of the last completed iteration are returned with
    ``cancelled=True``.

    Raises DatasetError / InvalidParameters before any parameter is allocated.
    """
    if dataset is None or dataset.n_docs == 0:
        raise DatasetError("dataset is missing or has no documents")
    if n_topics < 1:
        raise InvalidParameters(f"number of topics must be >= 1, got {n_topics}")
    if n_iterations < 0:
        raise InvalidParameters(f"number of iterations must be >= 0, got {n_iterations}")
    if n_jobs == 0:
        raise InvalidParameters("n_jobs must not be 0")

    ctx = TrainingContext.from_dataset(dataset, n_topics, n_jobs=n_jobs)
    params = initialize(ctx, np.random.default_rng(random_seed))
    logger.info(
        f"PLSA: M={ctx.n_docs} V={ctx.vocab_size} K={n_topics} "
        f"occurrences={dataset.n_occurrences} iterations={n_iterations}"
    )

    result = TrainedParameters(params)
    for it in range(n_iterations):
        if stop_event is not None and stop_event.is_set():
            logger.info(f"PLSA: cancelled before iteration {it}")
            result.cancelled = True
            break

        bad_occurrences = e_step(ctx, params)
        if bad_occurrences:
            logger.warning(f"[{it}] E-step: {bad_occurrences} occurrences normalized by zero")

        bad_rows = m_step(ctx, params)
        if bad_rows:
            logger.warning(f"[{it}] M-step: {bad_rows} rows normalized by zero")

        L = log_likelihood(ctx, params)
        record = IterationRecord(it, L, degenerate=bool(bad_occurrences or bad_rows or not np.isfinite(L)))
        result.history.append(record)
        if reporter is not None:
            reporter(record)

    return result


def run(
    source: str,
    n_topics: int,
    n_iterations: int,
    random_seed=RANDOM_STATE,
    reporter: Optional[Reporter] = print_reporter,
    n_jobs: int = N_JOBS,
) -> bool:
    """Load ``source`` and train on it; False if the dataset or parameters are invalid."""
    try:
        dataset = load_dataset(source)
        train(dataset, n_topics, n_iterations, random_seed=random_seed,
              reporter=reporter, n_jobs=n_jobs)
    except PLSAError as e:
        logger.error(f"PLSA run failed: {e}")
        return False
    return True
