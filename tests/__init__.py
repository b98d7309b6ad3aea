# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Zip Uploader API:
# - test_archive.py: Zip validation and entry path sanitizing
# - test_upload_service.py: Extraction into the extracted bucket
# - test_folder_service.py: Folder listings, mark-done and deletion
# - test_log_service.py / test_account_service.py / test_reports.py
# - test_auth.py: Operator identity from bearer tokens
# - test_api.py: Integration tests for API endpoints
#
# Run tests with: pytest
# =============================================================================
