"""Domain layer: value objects, events, the replay fold and snapshot state.

Pure Python with no I/O. Must not import from interfaces, adapters,
service_layer, bootstrap or entrypoints.
"""
