# Probabilistic Latent Semantic Analysis fitted by EM over sparse weighted
# document vectors, with an inverted index for the P(w|z) update.

from .errors import PLSAError, DatasetError, InvalidParameters
from .dataset import Feature, Dataset, load_dataset, load_svmlight, load_triples_csv
from .inverted_index import Posting, InvertedIndex, build_inverted_index
from .context import TrainingContext
from .parameters import ParameterStore, initialize
from .em import e_step, m_step, log_likelihood
from .trainer import IterationRecord, TrainedParameters, train, run, print_reporter, log_reporter
from .plsa import PLSA
