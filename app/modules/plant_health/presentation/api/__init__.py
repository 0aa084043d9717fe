"""
Plant Health API layer: schemas and versioned routers.
"""
