"""
Core compensation logic.

Pure classification, points, hierarchy and distribution code. Import the
public names from the top-level ``compensation`` package.
"""
