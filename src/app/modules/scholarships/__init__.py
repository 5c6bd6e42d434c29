"""
Scholarships Module

Scholarship listings and, for the global plan, profile-based auto-matching.
"""
