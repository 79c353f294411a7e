"""
GSR window processing

Trial/window alignment, feature extraction and labelled dataset construction.
"""

from .alignment import align, window_bounds
from .features import FeatureExtractor, count_peaks, extract
from .dataset import DatasetBuilder, build, to_frame

__all__ = [
    'align', 'window_bounds', 'FeatureExtractor', 'count_peaks', 'extract',
    'DatasetBuilder', 'build', 'to_frame'
]
