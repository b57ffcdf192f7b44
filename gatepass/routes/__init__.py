"""
Blueprints for the gate pass application
"""
