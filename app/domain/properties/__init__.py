"""
Properties Domain

Public listing search, featured listings and admin property management.
"""
