"""
Output adapters — host-provided sinks the dispatcher writes through.
"""
