"""Core aggregation logic: route models, normalization, ranking and errors."""
