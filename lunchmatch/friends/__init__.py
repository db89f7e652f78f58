"""
Friends and friend recommendations.

Responsibilities:
- Track accepted friend connections.
- Store restaurants one user recommends to another.
- Surface restaurants that friends rated highly.
"""
