"""Search query translation.

The query layer converts a free-form sports search string into a structured query: free text for
full-text matching, an AND-joined filter expression, and an optional geo-radius anchor.
"""
