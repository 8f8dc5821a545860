from __future__ import annotations

from typing import Callable, Sequence, TypeVar, Union
from typing_extensions import Literal
import numpy as np
from numpy.typing import ArrayLike


_T = TypeVar("_T")
_SequenceLike = Union[Sequence[_T], np.ndarray]

# A sequence of feature vectors: shape (n_frames, n_features)
_FeatureSequence = Union[_SequenceLike[_SequenceLike[float]], ArrayLike]

# Pairwise distance between two feature vectors
_DistanceFunction = Callable[[np.ndarray, np.ndarray], float]

# Either a callable or a metric name understood by scipy.spatial.distance.cdist
_MetricSpec = Union[str, _DistanceFunction]

_PassTypeName = Literal["neighbors", "diagonals"]
