"""
Content operation registrations.

News aggregation, literature search, pricing feeds, GitHub trending, URL text
extraction and drug lookup. All are GET requests with query parameters; the
general API key travels as the ``key`` query parameter.
"""

import logging
from typing import Optional

from ..operation_registry import (
    CredentialKind,
    CredentialPlacement,
    CredentialSpec,
    Destination,
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    ParameterSpec,
    ParamType,
    get_operation_registry,
)

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 2048

API_KEY_CREDENTIAL = CredentialSpec(
    kind=CredentialKind.API_KEY,
    placement=CredentialPlacement.QUERY,
    field_name="key",
)

API_KEY_PARAM = ParameterSpec(
    name="api_key",
    type=ParamType.STRING,
    destination=Destination.CREDENTIAL,
    description="API key for this call (overrides KLAUD_API_KEY)",
)


# ============================================================================
# Operation Descriptors
# ============================================================================

SEARCH_HACKERNEWS = OperationDescriptor(
    name="search_hackernews",
    category=OperationCategory.CONTENT,
    description="Get top Hacker News stories filtered by category (ai, crypto, dev, science, security, all)",
    method="GET",
    path="/api/hn",
    parameters=(
        ParameterSpec(
            name="category",
            type=ParamType.ENUM,
            destination=Destination.QUERY,
            description="Topic category to filter stories",
            choices=("ai", "crypto", "dev", "science", "security", "all"),
            default="all",
        ),
        ParameterSpec(
            name="limit",
            type=ParamType.INTEGER,
            destination=Destination.QUERY,
            description="Number of stories to return",
            minimum=1,
            maximum=30,
            default=10,
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
)

SEARCH_PUBMED = OperationDescriptor(
    name="search_pubmed",
    category=OperationCategory.CONTENT,
    description="Search PubMed for biomedical and life science articles",
    method="GET",
    path="/api/pubmed",
    parameters=(
        ParameterSpec(
            name="query",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Search query (e.g. 'CRISPR cancer therapy')",
            required=True,
            max_length=MAX_QUERY_LENGTH,
        ),
        ParameterSpec(
            name="limit",
            type=ParamType.INTEGER,
            destination=Destination.QUERY,
            description="Number of articles to return",
            minimum=1,
            maximum=20,
            default=5,
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
)

SEARCH_ARXIV = OperationDescriptor(
    name="search_arxiv",
    category=OperationCategory.CONTENT,
    description="Search arXiv preprints with optional category filter",
    method="GET",
    path="/api/arxiv",
    parameters=(
        ParameterSpec(
            name="query",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Search query (e.g. 'LLM agents reasoning')",
            required=True,
            max_length=MAX_QUERY_LENGTH,
        ),
        ParameterSpec(
            name="category",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="arXiv category filter (e.g. cs.AI, q-bio.BM, stat.ML)",
            max_length=64,
        ),
        ParameterSpec(
            name="limit",
            type=ParamType.INTEGER,
            destination=Destination.QUERY,
            description="Number of papers to return",
            minimum=1,
            maximum=20,
            default=5,
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
)

GET_CRYPTO_PRICES = OperationDescriptor(
    name="get_crypto_prices",
    category=OperationCategory.CONTENT,
    description="Get real-time cryptocurrency prices (CoinGecko with CoinCap fallback)",
    method="GET",
    path="/api/crypto",
    parameters=(
        ParameterSpec(
            name="ids",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Comma-separated CoinGecko IDs (e.g. bitcoin,ethereum,solana)",
            default="bitcoin,ethereum",
            max_length=MAX_QUERY_LENGTH,
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
)

GET_GITHUB_TRENDING = OperationDescriptor(
    name="get_github_trending",
    category=OperationCategory.CONTENT,
    description="Get trending GitHub repositories",
    method="GET",
    path="/api/github",
    parameters=(
        ParameterSpec(
            name="language",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Filter by programming language (e.g. python, rust, typescript)",
            max_length=64,
        ),
        ParameterSpec(
            name="since",
            type=ParamType.ENUM,
            destination=Destination.QUERY,
            description="Time range for trending",
            choices=("daily", "weekly", "monthly"),
            default="daily",
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
)

EXTRACT_URL = OperationDescriptor(
    name="extract_url",
    category=OperationCategory.CONTENT,
    description="Extract readable text content from any URL (HTML to clean text)",
    method="GET",
    path="/api/extract",
    parameters=(
        ParameterSpec(
            name="url",
            type=ParamType.URL,
            destination=Destination.QUERY,
            description="URL to extract text from",
            required=True,
            max_length=MAX_QUERY_LENGTH,
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
)

SEARCH_DRUGS = OperationDescriptor(
    name="search_drugs",
    category=OperationCategory.CONTENT,
    description="Search drugs and molecules via ChEMBL (2.4M compounds). Search by name or by protein target.",
    method="GET",
    path="/api/drugs",
    parameters=(
        ParameterSpec(
            name="query",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Drug/molecule name (e.g. imatinib, aspirin)",
            max_length=MAX_QUERY_LENGTH,
        ),
        ParameterSpec(
            name="target",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Protein target name (e.g. EGFR, BRCA1, JAK2)",
            max_length=MAX_QUERY_LENGTH,
        ),
        API_KEY_PARAM,
    ),
    credential=API_KEY_CREDENTIAL,
    require_any=("query", "target"),
)

CONTENT_OPERATIONS = [
    SEARCH_HACKERNEWS,
    SEARCH_PUBMED,
    SEARCH_ARXIV,
    GET_CRYPTO_PRICES,
    GET_GITHUB_TRENDING,
    EXTRACT_URL,
    SEARCH_DRUGS,
]


# ============================================================================
# Registration Function
# ============================================================================

def register_content_operations(registry: Optional[OperationRegistry] = None):
    """Register all content operations with the registry."""
    registry = registry if registry is not None else get_operation_registry()
    registry.register_all(CONTENT_OPERATIONS)
    logger.debug(f"Registered {len(CONTENT_OPERATIONS)} content operations")
