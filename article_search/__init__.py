"""
Article search API.
Translates HTTP requests into Elasticsearch queries over the articles index.
"""
