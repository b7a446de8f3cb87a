from typing import List, Optional

from pydantic import BaseModel, HttpUrl

from app.models.page import PageDescriptor


class ValidateRequest(BaseModel):
    pages: Optional[List[PageDescriptor]] = None
    """Descriptors to validate.

    When omitted the bundled catalogue is validated.  Submitted descriptors
    are validated as given, so duplicate ids or paths are reported by the
    pre-publish gate rather than rejected up front.
    """


class RaceImportRequest(BaseModel):
    url: HttpUrl
    """Location of a JSON object of race records keyed by route key."""
