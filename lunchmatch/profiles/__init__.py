"""
Taste profiles.

Responsibilities:
- Resolve a user's taste profile, falling back to the shared default.
- Keep profiles in an in-memory store keyed by user id.
- Learn from each new rating and apply explicit settings edits.
- Compare two users' profiles for friend overlap.
"""
