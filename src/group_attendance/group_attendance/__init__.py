"""Group Attendance package.

This package is organized by feature modules (persons, groups, memberships,
meetings, attendance) with a thin Flask controller layer on top of service
and repository layers.
"""
