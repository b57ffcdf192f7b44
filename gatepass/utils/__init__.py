"""
Utility modules for the gate pass application
"""
