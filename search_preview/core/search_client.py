"""Search engine client construction and error translation.

All calls to the search engine go through ``remote_call`` so that client
failures reach callers as ``RemoteError`` with the plugin id and index name
attached.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from opensearchpy import OpenSearch
from opensearchpy.exceptions import OpenSearchException

from .config import Settings
from ..exceptions import RemoteError

logger = logging.getLogger(__name__)


def create_search_client(settings: Settings) -> OpenSearch:
    """Build a search engine client from the application settings."""
    kwargs: dict = {
        "hosts": settings.get_opensearch_hosts(),
        "verify_certs": settings.opensearch_verify_certs,
        "timeout": settings.opensearch_timeout,
    }
    if settings.opensearch_username:
        kwargs["http_auth"] = (settings.opensearch_username, settings.opensearch_password)

    return OpenSearch(**kwargs)


@contextmanager
def remote_call(operation: str, **context: Any) -> Iterator[None]:
    """Translate search client exceptions raised in the block into RemoteError.

    Args:
        operation: Short name of the remote operation, e.g. ``"indices.delete"``.
        **context: Diagnostic fields (plugin_id, index_name) added to the error.
    """
    try:
        yield
    except OpenSearchException as e:
        raise RemoteError(
            f"Search engine call '{operation}' failed: {e}",
            operation=operation,
            original_error=e,
            **context,
        ) from e
