"""dispatch_criteria: canonical dispatch keys for request-shape mock matching.

All public types are exported from this module for flat imports:

    from dispatch_criteria import extract_from_uri_pattern, infer_dispatcher
"""

__version__ = "0.1.0"

# Canonical forms
from dispatch_criteria._canonical import (
    PATH_MARKER,
    QUERY_MARKER,
    RULE_SEPARATOR,
    format_criteria,
    join_rule,
    split_rule,
)

# Dispatchers: see dispatch_criteria._dispatcher for details
from dispatch_criteria._dispatcher import (
    DISPATCH_STYLES,
    ELEMENTS_SEPARATOR,
    ConfigParseError,
    DispatcherConfig,
    DispatchStyle,
    infer_dispatcher,
    parse_dispatcher_config,
)

# Example URIs
from dispatch_criteria._prefix import (
    EmptyExamplesError,
    extract_common_prefix,
    extract_from_uri_parts,
    extract_parts_from_uris,
)

# Query parameters
from dispatch_criteria._query import (
    QueryDecodeError,
    QueryParams,
    extract_from_uri_params,
    extract_params_from_uri,
    parse_query,
)

# Templates
from dispatch_criteria._template import (
    MAX_TEMPLATE_LENGTH,
    LiteralRun,
    Placeholder,
    Segment,
    TemplateTooLongError,
    UriTemplate,
    compile_template,
    extract_from_uri_pattern,
    extract_parts_from_uri_pattern,
)
from dispatch_criteria._types import DispatchCriteria, DispatchError, DispatchRule

__all__ = [
    # Types
    "DispatchRule",
    "DispatchCriteria",
    "DispatchError",
    # Canonical forms
    "RULE_SEPARATOR",
    "PATH_MARKER",
    "QUERY_MARKER",
    "join_rule",
    "split_rule",
    "format_criteria",
    # Example URIs
    "EmptyExamplesError",
    "extract_common_prefix",
    "extract_parts_from_uris",
    "extract_from_uri_parts",
    # Templates
    "UriTemplate",
    "LiteralRun",
    "Placeholder",
    "Segment",
    "TemplateTooLongError",
    "MAX_TEMPLATE_LENGTH",
    "compile_template",
    "extract_parts_from_uri_pattern",
    "extract_from_uri_pattern",
    # Query parameters
    "QueryParams",
    "QueryDecodeError",
    "parse_query",
    "extract_params_from_uri",
    "extract_from_uri_params",
    # Dispatchers
    "DispatchStyle",
    "DispatcherConfig",
    "ConfigParseError",
    "DISPATCH_STYLES",
    "ELEMENTS_SEPARATOR",
    "infer_dispatcher",
    "parse_dispatcher_config",
]
