"""swasthsetu_server: FastAPI REST API for the registration registry.

Exposes the RegistrationWorkflow over HTTP: role-specific registration
submission, admin review (approve / decline), decision notifications, portal
login, and catalog reference data.
"""
