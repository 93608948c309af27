"""
Cross-dataset analytics.

Responsibilities:
- Compare photo-per-review engagement between guide-matched and unmatched
  restaurants.
- Summarise a city: average rating, guide coverage and award breakdown.
- Rank a city's top restaurants by rating and review volume.
"""
