"""
HTTP surface for the InflationToken service.
"""
