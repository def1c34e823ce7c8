"""
Search services for the articles index.
"""
