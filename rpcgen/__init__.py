"""
rpcgen — C++ RPC binding generator driven by protoc descriptors.
"""

__version__ = "0.1.0"
