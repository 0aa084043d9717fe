"""
Feature modules of the Plant Health application.
"""
