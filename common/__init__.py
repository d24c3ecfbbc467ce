"""
Shared pieces: request-scoped types, the Result/error taxonomy, JSON logging.
"""
