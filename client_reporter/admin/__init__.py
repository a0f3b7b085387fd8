from client_reporter.admin.views import AdminAuth, authentication_backend, setup_admin

__all__ = ["AdminAuth", "authentication_backend", "setup_admin"]
