# Services package init
"""
RouteDemo: Services Package
===========================

What:  Logic that route handlers delegate to, testable without HTTP.

Service Inventory:
    - upload_service.py: extract_upload(), validate_filename(), UploadService
"""
