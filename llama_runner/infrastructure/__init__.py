"""Infrastructure layer for the llama runner.

Concrete implementations of the domain interfaces on top of torch,
transformers and numpy.
"""
