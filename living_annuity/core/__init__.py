"""Numeric engine: rate conversion, simulation, aggregation and solving."""
