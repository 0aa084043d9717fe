"""
Plant Health Presentation Layer

FastAPI endpoints, request/response schemas and dependencies.
"""
