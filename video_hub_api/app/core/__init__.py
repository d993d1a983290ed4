"""
Cross-cutting infrastructure: configuration, logging, database access,
credentials, media storage and the error types shared by services.
"""
