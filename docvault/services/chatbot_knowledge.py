"""Static help content for the chatbot.

Used to ground general questions and as the deterministic fallback when
no LLM is configured or the LLM call fails.
"""

SYSTEM_OVERVIEW = """\
DocVault is a document management system with these features:
- Upload, view, download and delete documents
- Hierarchical folders for organization
- Search and filter documents by name, tag, star and sharing status
- Colored tags private to each user
- Sharing with individual users or whole departments
- Keyword search over extracted document text
- Invoice records linked to documents, exportable to Excel
- API endpoints under /api for auth, documents, folders, tags, invoices and chatbot
"""

PEOPLE_PROMPT = (
    "You are a helpful assistant in a document management system. Answer naturally "
    "and conversationally based on the database information provided. When asked "
    "about a person, mention their role, department and contact details."
)

DOCUMENTS_PROMPT = (
    "You are a helpful assistant for a document management system. Answer the "
    "question from the document content provided and name the document that "
    "contains the information."
)

GENERAL_PROMPT = (
    "You are a helpful assistant for a document management system. Only answer "
    f"questions about these features:\n{SYSTEM_OVERVIEW}\nKeep responses concise."
)

ROLE_DESCRIPTIONS = {
    "admin": "They handle system administration and user management.",
    "manager": "They oversee team operations and project management.",
    "employee": "They contribute to projects and day-to-day work.",
}
DEFAULT_ROLE_DESCRIPTION = "They work in the organization."

# Checked in order; the first topic whose trigger appears in the query wins
HELP_TOPICS: list[tuple[tuple[str, ...], str]] = [
    (
        ("upload",),
        "Upload documents with the upload button or by drag and drop. Files up to "
        "50 MB are accepted, and PDF and text content becomes searchable shortly after.",
    ),
    (
        ("folder",),
        "Create folders and subfolders to organize documents. Folders you own can be "
        "shared with colleagues or with whole departments.",
    ),
    (
        ("search",),
        "Search documents by name, or filter by starred, shared, tag and folder. "
        "Ask me about a topic to search inside document text.",
    ),
    (
        ("tag",),
        "Create colored tags and attach them to your documents. Tags are private to you.",
    ),
    (
        ("api",),
        "The API has endpoints for authentication (/api/auth), documents "
        "(/api/documents), folders (/api/folders), tags (/api/tags), invoices "
        "(/api/invoices) and this chatbot (/api/chatbot).",
    ),
    (
        ("login", "register"),
        "Register with your name, email, password and department, then log in to "
        "receive an access token.",
    ),
    (
        ("invoice",),
        "Record invoices against documents with vendor, date, value and quantity, "
        "filter them by date, vendor or value, and export the list to Excel.",
    ),
    (
        ("visible", "see", "access", "private"),
        "Your documents are private by default. Other users see them only when you "
        "share a document or its folder with them, or share the folder with their "
        "department. Admins and managers can see everything.",
    ),
    (
        ("secure", "security", "safe"),
        "Access uses JWT authentication and bcrypt password hashing, and every "
        "listing is filtered by ownership and sharing before it is returned.",
    ),
    (
        ("share", "sharing"),
        "Share a document with specific users for reading, and grant write or delete "
        "permission explicitly. Folders can be shared with users or departments.",
    ),
    (
        ("help", "how", "work"),
        "Here is how to use DocVault:\n\n"
        "1. **Upload**: add files with the upload button\n"
        "2. **Organize**: create folders\n"
        "3. **Search**: find files by name or content\n"
        "4. **Tags**: categorize with colored tags\n"
        "5. **Share**: give colleagues access when needed\n\n"
        "What would you like to learn more about?",
    ),
    (
        ("website", "use", "what"),
        "DocVault keeps your documents organized in one place: folders, tags, search, "
        "sharing and invoice tracking behind secure authentication.",
    ),
]

DEFAULT_HELP = (
    "DocVault helps you upload, organize and share files with folders, tags, search "
    "and secure authentication. Which feature would you like to know about?"
)


def help_answer(query: str) -> str:
    """Pick the canned help answer matching the query."""
    lowered = query.lower()
    for triggers, answer in HELP_TOPICS:
        if any(trigger in lowered for trigger in triggers):
            return answer
    return DEFAULT_HELP
