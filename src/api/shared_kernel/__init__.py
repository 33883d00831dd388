"""Shared Kernel.

Building blocks every bounded context may depend on: the authorization
vocabulary (permission levels, capabilities, decisions), the session token
codec, and the observation context carried by domain probes. Nothing here
may import from a bounded context.
"""
