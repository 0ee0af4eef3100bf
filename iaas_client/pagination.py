"""Pagination - limit/offset iteration over list operations.

List operations take `limit` and `offset` parameters and report
`total_count` alongside one `*_set` array per page:

    for cache in iter_items(service, DESCRIBE_CACHES, "cache_set"):
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.service import Service

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def iter_pages(
    service: Service,
    op_def: OperationDef,
    input_value: BaseModel | None = None,
    page_size: int | None = None,
    item_field: str | None = None,
) -> Iterator[Any]:
    """Yield Output pages until total_count is reached or a page is empty.

    Args:
        service: Service that runs op_def.
        op_def: A list operation whose Input has limit and offset fields.
        input_value: Filters for the listing; its own limit/offset are the
            starting point unless page_size overrides the limit.
        page_size: Items per page; defaults to the input's limit, then 20.
        item_field: Output attribute holding the page's items. When omitted
            only total_count ends iteration.

    Raises:
        ValueError: If op_def's Input has no limit/offset fields.
    """
    input_type = op_def.input_type
    if "limit" not in input_type.model_fields or "offset" not in input_type.model_fields:
        raise ValueError(f"{op_def.action} is not paginated (no limit/offset)")

    base = input_value if input_value is not None else input_type()
    limit = page_size or getattr(base, "limit", None) or DEFAULT_PAGE_SIZE
    offset = getattr(base, "offset", None) or 0

    while True:
        page_input = base.model_copy(update={"limit": limit, "offset": offset})
        logger.debug("Fetching %s page: offset=%d limit=%d", op_def.action, offset, limit)
        page = service.invoke(op_def, page_input)
        yield page

        received = len(getattr(page, item_field, None) or []) if item_field else limit
        if received == 0:
            return
        offset += received if item_field else limit

        total_count = getattr(page, "total_count", None)
        if total_count is None or offset >= total_count:
            return


def iter_items(
    service: Service,
    op_def: OperationDef,
    item_field: str,
    input_value: BaseModel | None = None,
    page_size: int | None = None,
) -> Iterator[Any]:
    """Yield the items of item_field across every page."""
    for page in iter_pages(service, op_def, input_value, page_size=page_size, item_field=item_field):
        yield from getattr(page, item_field, None) or []
