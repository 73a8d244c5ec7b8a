# Services package

from docvault.services.access_resolver import AccessResolver, FolderVisibility
from docvault.services.chatbot_service import ChatbotService, extract_keywords
from docvault.services.document_service import DocumentService
from docvault.services.folder_service import FolderService
from docvault.services.invoice_service import InvoiceFilters, InvoiceService
from docvault.services.query_composer import (
    DocumentFilters,
    DocumentListMode,
    QueryComposer,
)
from docvault.services.sharing_service import DocumentPermissions, SharingService
from docvault.services.tag_service import TagService
from docvault.services.user_service import UserService

__all__ = [
    "AccessResolver",
    "ChatbotService",
    "DocumentFilters",
    "DocumentListMode",
    "DocumentPermissions",
    "DocumentService",
    "FolderService",
    "FolderVisibility",
    "InvoiceFilters",
    "InvoiceService",
    "QueryComposer",
    "SharingService",
    "TagService",
    "UserService",
    "extract_keywords",
]
