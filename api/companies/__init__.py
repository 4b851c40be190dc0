"""
Company catalog: public voting list and admin management (soft delete only).
"""
