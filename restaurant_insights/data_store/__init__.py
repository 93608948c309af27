"""
Read-only restaurant datastore.

Responsibilities:
- Define the repository interface the insight components read from.
- Load crowd-review, category, guide and photo snapshots from CSV.
- Hold the current snapshot and swap it on refresh.
"""
