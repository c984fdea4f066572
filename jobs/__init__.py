"""
Standalone background jobs, runnable with `python -m jobs.<name>`.
"""
