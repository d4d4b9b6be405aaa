"""Time Clock package.

Feature modules (punches, accounting, adjustments, users) each carry a model,
a repository protocol with its MySQL implementation, a service and a thin Flask
controller.
"""
