"""
Infrastructure layer - external system integrations.
Keeps request handling clean from storage and SDK details.
"""
