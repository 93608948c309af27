"""
Peer-relative scoring.

Responsibilities:
- Aggregate mean rating and review volume over a city/category cohort.
- Label each cohort member as a hidden gem, overrated or typical.
- Cache cohort aggregates between classification calls.
"""
