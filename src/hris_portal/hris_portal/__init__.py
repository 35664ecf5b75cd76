"""HR portal core.

Feature modules (attendance, performance) each carry their pure engine, a
repository protocol with its MySQL implementation, a service and a thin Flask
controller.
"""
