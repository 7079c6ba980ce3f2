"""Attendance Tracker package.

Daily attendance for facility staff: check-in/check-out, break segments,
derived hours and read-only reporting. Organised by feature modules
(attendance, reports) with a thin Flask controller layer over
service/repository layers.
"""
