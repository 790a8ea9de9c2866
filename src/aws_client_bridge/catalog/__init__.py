"""Method catalog and overload resolution for client classes."""
