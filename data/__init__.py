"""Data subpackage: synthetic generators, preprocessing and splits."""

from .generators import (
    DEFAULT_BETA,
    GeneratorError,
    SyntheticConfig,
    SyntheticDataset,
    generate_synthetic,
    synthetic_config_from_dict,
)
from .preprocess import (
    center_y,
    standardize_X,
    apply_standardization,
    rescale_coefficients,
    StandardizationConfig,
    StandardizeResult,
)
from .splits import train_test_split_indices, SplitResult
