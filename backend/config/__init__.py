"""Django project configuration for clinic-billing."""
