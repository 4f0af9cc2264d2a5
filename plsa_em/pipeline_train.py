# plsa_em/pipeline_train.py
# -----------------------------------------------------------
# PLSA training CLI
# - Loads a sparse dataset (svmlight, or doc,dim,weight CSV)
# - Fits PLSA by EM for a fixed number of iterations
# - Prints one likelihood line per iteration
#
# Usage:
#   python -m plsa_em.pipeline_train --data data/corpus.svm --topics 20 --iters 100
# -----------------------------------------------------------

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import numpy as np

from .config import PLSA_TOPICS, PLSA_MAX_ITERS, RANDOM_STATE, N_JOBS, LOG_LEVEL, TOP_WORDS
from .dataset import load_dataset
from .errors import PLSAError
from .logger import configure_logging
from .trainer import train, print_reporter


def main(data: str, topics: int, iters: int, seed: int, n_jobs: int, top: int) -> int:
    try:
        dataset = load_dataset(data)
        result = train(dataset, topics, iters, random_seed=seed,
                       reporter=print_reporter, n_jobs=n_jobs)
    except PLSAError as e:
        print(f"[ERROR] {e}")
        return 1

    if result.degenerate:
        print("[WARN] Degenerate normalization occurred; likelihoods may be NaN/inf.")

    print("\n[INFO] Topic prior P(z):")
    for z, p in enumerate(result.topic_prior):
        print(f"  - topic {z:3d}: {p:.4f}")

    if top > 0:
        print(f"\n[INFO] Top {top} dimensions per topic:")
        order = np.argsort(-result.word_given_topic, axis=1, kind="stable")[:, :top]
        for z, row in enumerate(order):
            print(f"  - topic {z:3d}: " + ", ".join(str(int(w)) for w in row))
    return 0


def cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="PLSA topic model trainer (EM)")
    parser.add_argument("--data", required=True, help="Path to the dataset (.svm/.txt svmlight or .csv triples)")
    parser.add_argument("--topics", type=int, default=PLSA_TOPICS, help=f"Number of topics (default: {PLSA_TOPICS})")
    parser.add_argument("--iters", type=int, default=PLSA_MAX_ITERS, help=f"EM iterations (default: {PLSA_MAX_ITERS})")
    parser.add_argument("--seed", type=int, default=RANDOM_STATE, help=f"Random seed (default: {RANDOM_STATE})")
    parser.add_argument("--n_jobs", type=int, default=N_JOBS, help=f"Worker threads (default: {N_JOBS})")
    parser.add_argument("--top", type=int, default=TOP_WORDS, help=f"Dimensions listed per topic (default: {TOP_WORDS})")
    parser.add_argument("--log_level", default=LOG_LEVEL, help=f"Log level (default: {LOG_LEVEL})")
    parser.add_argument("--log_dir", default=None, help="Also write logs under this directory")
    args = parser.parse_args(argv)

    configure_logging(args.log_level, log_dir=args.log_dir)
    return main(args.data, args.topics, args.iters, args.seed, args.n_jobs, args.top)


if __name__ == "__main__":
    sys.exit(cli())
