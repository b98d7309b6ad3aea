# =============================================================================
# core/ - Business Logic
# =============================================================================
# - models/: Pydantic schemas for results, logs, accounts and reports
# - services/: Upload pipeline, folder lifecycle, logs, accounts, reports
#
# Services receive the Supabase client explicitly; none of them know about
# HTTP.
# =============================================================================
