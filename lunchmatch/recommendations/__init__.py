"""
Recommendation engine.

Responsibilities:
- Score a restaurant catalog against one taste profile with explained reasons.
- Merge several profiles into a group profile and re-score for group fit.
- Gather a user's favourite and friend signals and serve ranked results.
"""
