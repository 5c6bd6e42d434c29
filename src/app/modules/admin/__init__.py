"""
Admin Module

Operational endpoints for administrators: background job inspection and
manual runs.
"""
