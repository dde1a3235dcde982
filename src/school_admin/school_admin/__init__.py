"""School Admin web interface.

Feature modules (users, students, justifications, entries) sit on top of a
remote REST service. Each module has a thin Flask controller, a service with
the client-side rules and an HTTP repository that talks to the API.
"""
