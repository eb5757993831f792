import logging
from typing import List

from ..base_module import BaseModule
from ..context import COLLECTION_KEY, SiteModel
from ..dates import parse_date
from ..errors import ContextNotFound

log = logging.getLogger(__name__)


def _linked_collection(model: SiteModel) -> List[str]:
    for link in model.links:
        key = model.normalize(link.context_path)
        if key not in model.records:
            continue
        owner = model.global_of(key)
        if owner is not None and COLLECTION_KEY in owner:
            return owner[COLLECTION_KEY]
    raise ContextNotFound("links", "no linked context belongs to a global collection")


class SortByDate(BaseModule):
    """Reorder the global collection newest first.

    Dates are compared in raw form, so this must run before DateFormatter.
    Contexts with equal dates keep their relative order.
    """
    requires = ("GlobalContext",)
    precedes = ("DateFormatter",)

    def run(self, model: SiteModel) -> None:
        keys = _linked_collection(model)
        instants = {k: parse_date(model.records[k].get("date"), k) for k in keys}
        keys[:] = sorted(keys, key=instants.__getitem__, reverse=True)
        log.debug("sorted %d contexts by date", len(keys))
