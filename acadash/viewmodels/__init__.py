"""Per-screen view-model controllers.

Each controller owns its collection, form and flag state, calls use cases
off the event loop and reports outcomes through the ``Notifier`` port.
"""
