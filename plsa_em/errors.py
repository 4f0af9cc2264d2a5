class PLSAError(Exception):
    """Base class for every error raised before or during training."""


class DatasetError(PLSAError):
    """Dataset source is missing, empty, unparseable or internally inconsistent."""


class InvalidParameters(PLSAError, ValueError):
    """Training hyperparameters or problem sizes that cannot be trained on."""
