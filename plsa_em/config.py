# =========================================================
#  PLSA-EM: Configuration
# =========================================================
#  Defaults for the EM trainer, dataset loaders and logging.
#  Notes:
#    • Function arguments and CLI flags override these values.
#    • Sanity checks at the bottom fail fast on a bad edit.
# =========================================================

from __future__ import annotations
import os

# =========================================================
#  Project paths (absolute, robust to current working dir)
# =========================================================
# This file lives in: <project_root>/plsa_em/config.py
BASE_DIR = os.path.dirname(os.path.dirname(__file__))  # <project_root>
DATA_DIR = os.path.join(BASE_DIR, "data")
LOG_DIR  = os.path.join(BASE_DIR, "logs")

# =========================================================
#  Probabilistic Latent Semantic Analysis (PLSA)
# =========================================================
PLSA_TOPICS    = 20
PLSA_MAX_ITERS = 100
RANDOM_STATE   = 42

# Worker threads for the E-step / M-step partitions (1 = sequential)
N_JOBS = 1

# Number of terms listed per topic by PLSA.top_words / the CLI summary
TOP_WORDS = 10

# =========================================================
#  Dataset loaders
# =========================================================
# sklearn.datasets.load_svmlight_file: True, False or "auto"
SVMLIGHT_ZERO_BASED = True

# Column names for the doc,dim,weight triples CSV
CSV_DOC_COL    = "doc"
CSV_DIM_COL    = "dim"
CSV_WEIGHT_COL = "weight"

# =========================================================
#  Logging (loguru)
# =========================================================
LOG_LEVEL     = "INFO"
LOG_ROTATION  = "1 day"
LOG_RETENTION = "30 days"

# =========================================================
#  Sanity checks
# =========================================================
assert PLSA_TOPICS >= 1, "PLSA_TOPICS must be >= 1."
assert PLSA_MAX_ITERS >= 0, "PLSA_MAX_ITERS must be >= 0."
assert N_JOBS != 0, "N_JOBS must be a positive count or -1 (all cores)."
assert SVMLIGHT_ZERO_BASED in (True, False, "auto"), "SVMLIGHT_ZERO_BASED must be True, False or 'auto'."
