"""
Plant Health Domain Layer

Business entities, repository contracts and domain services. Nothing in
this layer knows which store or HTTP client backs it.
"""
