# Services package init
"""
Basecamp Backend — Services Layer
===================================

What:  Logic sitting between routes (HTTP) and external systems.

Service Inventory:
    - FileService:  temp-file storage for multipart uploads, and cleanup
    - MediaService: Cloudinary upload/delete, removing the temp file afterwards

Routes stay thin: they read the request, call a service, and wrap the
result in an APIResponse envelope.
"""
