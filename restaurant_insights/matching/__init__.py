"""
Entity resolution between the curated guide and the crowd-review dataset.

Responsibilities:
- Normalise listing names for comparison.
- Join guide entries to restaurants on normalised name.
- Accept a candidate pair only when the two coordinates are within the
  configured great-circle distance.
"""
