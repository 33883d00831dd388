"""Ports (interfaces) for IAM bounded context.

Ports define the contracts the application layer depends on. Infrastructure
provides the implementations.
"""
