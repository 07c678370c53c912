"""
handlers/ - Presentation Layer
================================
Flask blueprints. Each handler validates the HTTP request, delegates to the
appropriate Service, and turns the result into a JSON response.
No business logic lives here; errors are rendered by error_handler.
"""
