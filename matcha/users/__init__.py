"""
User records and their in-memory persistence.

Responsibilities:
- Model user profiles, tolerating list fields stored as serialised text.
- Keep users, likes and profile views in process-wide stores.
- Seed demo users and maintain profile completion / fame rating.
"""
