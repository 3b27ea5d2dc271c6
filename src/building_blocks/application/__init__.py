"""Application Layer.

Block registry, copy and statistics operations, and the block service
that runs them against stored buildings.
"""
