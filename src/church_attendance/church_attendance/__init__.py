"""Church attendance tracker package.

Organized by feature modules (dates, members, attendance, badges, months, ...)
with a thin Flask controller layer over store-backed repositories and services.
"""
