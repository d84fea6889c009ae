"""
Operator scripts for the InflationToken service.
"""
