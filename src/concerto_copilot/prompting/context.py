"""Embedding query construction from context documents."""

from ..errors import MissingDocumentError
from ..models import Documents, RequestType

SAMPLE_DOCUMENT = "sample.md"
GRAMMAR_DOCUMENT = "grammar.tem.md"
PACKAGE_DOCUMENT = "package.json"


def generate_embedding_prompt(
    documents: Documents, request_type: RequestType | str
) -> str:
    """Build the text to embed for a retrieval-backed request.

    Grammar requests embed the sample; model requests embed the grammar
    and package descriptor together. Other request types do not retrieve
    and get an empty query.

    Raises:
        MissingDocumentError: If a model request lacks grammar.tem.md or
            package.json
        UnsupportedRequestTypeError: If request_type is unknown
    """
    request_type = RequestType.parse(request_type)

    if request_type is RequestType.GRAMMAR:
        return documents.find(SAMPLE_DOCUMENT) or ""

    if request_type is RequestType.MODEL:
        grammar = documents.find(GRAMMAR_DOCUMENT)
        package = documents.find(PACKAGE_DOCUMENT)
        missing = [
            name
            for name, content in ((GRAMMAR_DOCUMENT, grammar), (PACKAGE_DOCUMENT, package))
            if not content
        ]
        if missing:
            raise MissingDocumentError(missing)
        return f"{grammar} {package}"

    return ""
