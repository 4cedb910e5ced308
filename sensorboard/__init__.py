"""
sensorboard - web dashboard for a home sensor-monitoring system
"""

__version__ = "1.0.0"
