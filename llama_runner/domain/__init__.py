"""Domain layer for the llama runner.

Core generation logic and entities, independent of how the model is
loaded or where its output is displayed.
"""
