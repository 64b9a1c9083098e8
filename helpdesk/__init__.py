"""HR/IT helpdesk ticketing service"""

__version__ = "0.1.0"
