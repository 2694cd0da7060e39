"""
Candidate discovery.

Responsibilities:
- Fetch a bounded candidate pool (radius query or fallback pool).
- Exclude the viewer and already-liked users, keep mutually compatible ones.
- Score candidates on distance, shared interests, fame and recency.
- Sort by the requested key and return one page plus the total count.
"""
