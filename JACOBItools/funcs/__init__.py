"""
JACOBItools numerical function modules.
"""
