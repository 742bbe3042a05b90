"""Face descriptor matching against an enrolled candidate pool."""
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

DESCRIPTOR_LENGTH = 128
DEFAULT_MATCH_THRESHOLD = 0.6

class Match(NamedTuple):
    """Best candidate found for a probe descriptor."""
    candidate_id: int
    distance: float

def _as_descriptor(values) -> Optional[np.ndarray]:
    """Return a float vector, or None unless the data is 128 finite values."""
    if values is None:
        return None
    try:
        vector = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    if vector.shape != (DESCRIPTOR_LENGTH,) or not np.isfinite(vector).all():
        return None
    return vector

class BiometricMatcher:
    """
    Nearest-neighbour matcher over 128-dimensional face descriptors.
    
    Distances are Euclidean. A candidate matches only when its distance is
    strictly below the threshold; the closest match wins and equal distances
    resolve to the lowest candidate id. Descriptors are never stored or logged.
    """
    
    def __init__(self, threshold: float = DEFAULT_MATCH_THRESHOLD):
        self.threshold = threshold
    
    @staticmethod
    def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
        return float(np.linalg.norm(a - b))
    
    def find_best_match(
        self,
        probe: Optional[Sequence[float]],
        candidates: Iterable[Tuple[int, Optional[Sequence[float]]]]
    ) -> Optional[Match]:
        """Find the closest candidate under the threshold, or None."""
        probe_vector = _as_descriptor(probe)
        if probe_vector is None:
            return None
        
        best = None
        for candidate_id, descriptor in candidates:
            candidate_vector = _as_descriptor(descriptor)
            if candidate_vector is None:
                continue
            
            distance = self.euclidean_distance(probe_vector, candidate_vector)
            if not distance < self.threshold:
                continue
            
            if best is None or (distance, candidate_id) < (best.distance, best.candidate_id):
                best = Match(candidate_id, distance)
        
        return best
