from __future__ import annotations

from dataclasses import dataclass

from django.core.paginator import EmptyPage, Paginator

from .conf import ledger_setting
from .exceptions import ValidationError


@dataclass(frozen=True)
class PageParams:
    page: int
    size: int
    sort_by: str
    direction: str

    @property
    def ordering(self) -> list[str]:
        prefix = "-" if self.direction == "DESC" else ""
        return [f"{prefix}{self.sort_by}", f"{prefix}id"]


def _int_param(raw: str, name: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer.", field=name)


def page_params(request, sort_fields: dict[str, str], default_sort: str) -> PageParams:
    """
    Reads {page, size, sortBy, direction} from the query string.

    sort_fields maps the public (camelCase) sort key to a model field.
    page is 0-based.
    """
    page = _int_param(request.GET.get("page") or "0", "page")
    size = _int_param(request.GET.get("size") or str(ledger_setting("DEFAULT_PAGE_SIZE")), "size")
    max_size = ledger_setting("MAX_PAGE_SIZE")

    if page < 0:
        raise ValidationError("page must be >= 0.", field="page")
    if size < 1 or size > max_size:
        raise ValidationError(f"size must be between 1 and {max_size}.", field="size")

    sort_key = (request.GET.get("sortBy") or default_sort).strip()
    if sort_key not in sort_fields:
        raise ValidationError(
            f"sortBy must be one of: {', '.join(sorted(sort_fields))}.",
            field="sortBy",
        )

    direction = (request.GET.get("direction") or "DESC").strip().upper()
    if direction not in ("ASC", "DESC"):
        raise ValidationError("direction must be ASC or DESC.", field="direction")

    return PageParams(page=page, size=size, sort_by=sort_fields[sort_key], direction=direction)


def paginate(qs, params: PageParams, serialize) -> dict:
    paginator = Paginator(qs.order_by(*params.ordering), params.size)
    try:
        page = paginator.page(params.page + 1)
        content = [serialize(obj) for obj in page.object_list]
    except EmptyPage:
        content = []

    total_pages = paginator.num_pages if paginator.count else 0
    return {
        "content": content,
        "totalElements": paginator.count,
        "totalPages": total_pages,
        "number": params.page,
        "size": params.size,
        "numberOfElements": len(content),
        "first": params.page == 0,
        "last": params.page >= total_pages - 1,
        "empty": not content,
    }
