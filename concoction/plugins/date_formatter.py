import logging

from pydantic import BaseModel, ConfigDict

from ..base_module import BaseModule
from ..config import DEFAULT_DATE_FORMAT
from ..context import SiteModel
from ..dates import format_date, parse_date

log = logging.getLogger(__name__)


class DateFormatterParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    format: str = DEFAULT_DATE_FORMAT


class DateFormatter(BaseModule):
    """Replace every ``date`` with a display string.

    The formatted string is not guaranteed to parse back to the same
    instant, so the stage runs at most once per pipeline.
    """
    Params = DateFormatterParams
    once = True

    def run(self, model: SiteModel) -> None:
        formatted = {
            key: format_date(parse_date(record["date"], key), self.params.format)
            for key, record in sorted(model.records.items())
            if record.get("date") is not None
        }
        for key, value in formatted.items():
            model.records[key]["date"] = value
        log.debug("formatted %d dates with %r", len(formatted), self.params.format)
