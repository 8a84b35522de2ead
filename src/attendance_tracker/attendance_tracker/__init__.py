"""Attendance Tracker package.

Feature modules (attendance, branches) with a thin Flask controller layer
over service/repository layers. The attendance session state machine and the
time/geofence accounting live in ``attendance`` and ``common`` and never touch
the network.
"""
