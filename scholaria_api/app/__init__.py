"""
Application package.

The API is organised by concern: ``core`` holds configuration, logging,
errors and the record store; ``services`` the per entity business
logic; ``schemas`` the request models; ``api`` the versioned routers.
``main`` assembles them into the FastAPI application.
"""
