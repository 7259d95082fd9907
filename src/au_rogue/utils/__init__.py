"""
Shared utilities (console output, file discovery).
"""
