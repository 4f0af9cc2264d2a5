"""
em.py
-----
E-step, M-step and log-likelihood for PLSA with an asymmetric
P(z) P(d|z) P(w|z) parameterization.

  E-step:  P(z|d,w) ∝ P(z) P(d|z) P(w|z)
  M-step:  P(w|z) ∝ Σ_{(d,p) ∈ postings(w)} n(d,p) P(z|d,p)
           P(d|z) ∝ Σ_p n(d,p) P(z|d,p)
           P(z)   ∝ Σ_d Σ_p n(d,p) P(z|d,p)
  L = Σ_{d,p} n(d,p) log Σ_z P(z) P(d|z) P(w|z)

Both steps write into the ParameterStore in place and return the number of
normalizations whose divisor was zero (or already NaN). Those divisions are
left to produce NaN/inf; callers decide how to surface them.

Work inside a step is split with joblib threads: the E-step by contiguous
document ranges, the M-step by contiguous topic ranges. The topic prior is
normalized only after every topic range has finished.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

from .context import TrainingContext
from .parameters import ParameterStore


def _ranges(n_items: int, n_jobs: int) -> List[Tuple[int, int]]:
    n_chunks = max(1, min(effective_n_jobs(n_jobs), n_items))
    bounds = np.linspace(0, n_items, n_chunks + 1).astype(np.int64)
    return [(int(lo), int(hi)) for lo, hi in zip(bounds[:-1], bounds[1:])]


def _run_partitioned(fn: Callable[[int, int], int], ranges: Sequence[Tuple[int, int]]) -> list:
    if len(ranges) == 1:
        return [fn(*ranges[0])]
    return Parallel(n_jobs=len(ranges), prefer="threads")(delayed(fn)(lo, hi) for lo, hi in ranges)


def _segment_sums(values: np.ndarray, indptr: np.ndarray) -> np.ndarray:
    """Row-wise sums of values[:, indptr[j]:indptr[j+1]]; empty segments sum to 0."""
    out = np.zeros((values.shape[0], indptr.size - 1))
    starts = indptr[:-1]
    nonempty = indptr[1:] > starts
    if nonempty.any():
        out[:, nonempty] = np.add.reduceat(values, starts[nonempty], axis=1)
    return out


# -----------------------------------------------------------
#  E-step
# -----------------------------------------------------------
def e_step(ctx: TrainingContext, params: ParameterStore) -> int:
    """Fill params.posterior; returns the number of occurrences with a zero normalizer."""
    ds = ctx.dataset

    def _docs(d_lo: int, d_hi: int) -> int:
        lo, hi = int(ds.offsets[d_lo]), int(ds.offsets[d_hi])
        if lo == hi:
            return 0
        val = (params.topic_prior[:, None]
               * params.doc_given_topic[:, ds.doc_ids[lo:hi]]
               * params.word_given_topic[:, ds.dims[lo:hi]])
        norm = val.sum(axis=0)
        with np.errstate(divide="ignore", invalid="ignore"):
            params.posterior[:, lo:hi] = val / norm
        return int(np.count_nonzero(~(norm > 0)))

    return sum(_run_partitioned(_docs, _ranges(ctx.n_docs, ctx.n_jobs)))


# -----------------------------------------------------------
#  M-step
# -----------------------------------------------------------
def m_step(ctx: TrainingContext, params: ParameterStore) -> int:
    """
    Re-estimate P(w|z), P(d|z), then P(z) from the current posterior.

    P(z) uses the per-topic mass before P(d|z) is normalized, i.e. the
    expected number of weighted occurrences assigned to z. Returns the number
    of rows (including the prior) normalized by a zero total.
    """
    ds, index = ctx.dataset, ctx.index
    topic_mass = np.zeros(ctx.n_topics)

    def _topics(z_lo: int, z_hi: int) -> int:
        weighted = ds.weights * params.posterior[z_lo:z_hi]  # (k, N)

        # P(w|z): each dimension sums exactly its own posting list
        word_mass = _segment_sums(weighted[:, index.occurrences], index.indptr)
        word_norm = word_mass.sum(axis=1, keepdims=True)

        # P(d|z): documents are contiguous in the arena
        doc_mass = _segment_sums(weighted, ds.offsets)
        doc_norm = doc_mass.sum(axis=1, keepdims=True)

        with np.errstate(divide="ignore", invalid="ignore"):
            params.word_given_topic[z_lo:z_hi] = word_mass / word_norm
            params.doc_given_topic[z_lo:z_hi] = doc_mass / doc_norm
        topic_mass[z_lo:z_hi] = doc_norm[:, 0]

        return int(np.count_nonzero(~(word_norm > 0)) + np.count_nonzero(~(doc_norm > 0)))

    degenerate = sum(_run_partitioned(_topics, _ranges(ctx.n_topics, ctx.n_jobs)))

    # barrier: every topic's mass is known
    total = topic_mass.sum()
    with np.errstate(divide="ignore", invalid="ignore"):
        params.topic_prior[:] = topic_mass / total
    if not total > 0:
        degenerate += 1
    return degenerate


# -----------------------------------------------------------
#  Log-likelihood
# -----------------------------------------------------------
def log_likelihood(ctx: TrainingContext, params: ParameterStore) -> float:
    """Weighted data log-likelihood; -inf or NaN once any mixture probability is 0."""
    ds = ctx.dataset
    mix = (params.topic_prior[:, None]
           * params.doc_given_topic[:, ds.doc_ids]
           * params.word_given_topic[:, ds.dims]).sum(axis=0)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sum(ds.weights * np.log(mix)))
