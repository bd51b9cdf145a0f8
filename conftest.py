"""
Pytest root marker.

Placing this file at the repository root makes pytest insert the root into
``sys.path``, so test modules can import the package as ``src.ndstorage``.
"""
