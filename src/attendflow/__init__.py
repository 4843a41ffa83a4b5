"""AttendFlow package.

Geofenced attendance tracking organised by feature modules (geofence,
attendance, analytics, insights, ...) with a thin Flask controller layer over
service/repository layers.
"""
