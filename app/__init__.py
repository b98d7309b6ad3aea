# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, lifespan, middleware, error handlers
# - config.py: Environment variable loading and settings
# - dependencies.py: Supabase client and service injection
# - auth/: Operator identity from optional bearer tokens
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
