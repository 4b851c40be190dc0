"""
Ranked, percentage-annotated vote counts for active companies.
"""
