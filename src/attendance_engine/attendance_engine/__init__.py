"""Attendance & Teaching-Hours engine package.

Feature modules (schedules, attendance, signins, reports, ...) each carry a
domain model, a repository protocol with its MySQL implementation, a service
layer and a thin Flask controller.
"""
