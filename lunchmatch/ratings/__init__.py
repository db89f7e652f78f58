"""
Rating history.

Responsibilities:
- Record each user's restaurant ratings.
- Report a user's top-rated restaurants, which feed the favourites signal.
"""
