"""School Management package.

Organised by feature modules (students, schedules, attendance, transport, ...)
with a thin Flask controller layer over service and repository layers.
"""
