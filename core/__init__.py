"""
Shared configuration and logging for the InflationToken services.
"""
