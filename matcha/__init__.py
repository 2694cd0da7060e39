"""
Matcha dating backend.

Responsibilities:
- Register and authenticate users, manage their profiles and locations.
- Track likes and profile views, keep fame ratings up to date.
- Discover candidates: geospatial pool, mutual compatibility, weighted
  scoring, sorting and pagination.
"""
