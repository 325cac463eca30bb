"""
Analytics: alias lookup, the duplicate aggregation engine, and report rendering.
"""
