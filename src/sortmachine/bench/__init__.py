"""
Benchmark harness: timing (measure) and YAML-driven sweeps (runner).
"""
