"""Application layer for the llama runner.

Model loading and the generation use case, composed from domain services
and infrastructure adapters.
"""
