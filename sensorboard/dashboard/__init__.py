"""
sensorboard Dashboard Module

View data preparation (controller.py) and the graph aggregation it relies on
(series.py). Import submodules directly; the stores import series.py too.
"""
