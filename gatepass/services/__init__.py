"""
Inventory and gate pass stores with their database and HTTP backends
"""
