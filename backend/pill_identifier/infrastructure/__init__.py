"""
Infrastructure Layer

Adapters for the hosted generative model and the speech services.
"""
