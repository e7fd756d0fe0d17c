"""Engine client implementations.

``firebolt_sdk`` requires the optional ``sdk`` extra and is imported only
when the driver has to build its default client.
"""
