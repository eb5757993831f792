import logging

from pydantic import BaseModel, ConfigDict, Field

from ..base_module import BaseModule
from ..context import COLLECTION_KEY, GLOBAL_KEY, SiteModel
from ..errors import ContextNotFound

log = logging.getLogger(__name__)


class GlobalContextParams(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    globals_path: str = Field(alias="globalsPath")


class GlobalContext(BaseModule):
    """Link every context to the designated global context.

    The global record gets ``_contexts``, the keys of all other records in
    sorted order, and every record gets ``_global``, the global record's key.
    """
    Params = GlobalContextParams
    once = True

    def run(self, model: SiteModel) -> None:
        key = model.normalize(self.params.globals_path)
        if key not in model.records:
            raise ContextNotFound(key)

        others = [k for k in sorted(model.records) if k != key]
        model.records[key][COLLECTION_KEY] = others
        for k in model.records:
            model.records[k][GLOBAL_KEY] = key
        model.global_id = key
        log.debug("global context %s references %d contexts", key, len(others))
