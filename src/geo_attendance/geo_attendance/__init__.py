"""geo-attendance package.

Organized by feature modules (users, parties, attendance, location, ...)
with a thin Flask controller layer over service/repository layers.
"""
