"""
Utils Module - constants, palette and small math helpers
"""
