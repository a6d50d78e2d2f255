import re
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

# Same shape check the public site applies to poster/photo links.
URL_PATTERN = re.compile(r"^(https?|ftp)://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

ImageKind = Literal["upload", "url", "import"]


def is_url(value) -> bool:
    return isinstance(value, str) and bool(URL_PATTERN.match(value))


class ImageField(BaseModel):
    kind: ImageKind
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def strip_value(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v or None

    @model_validator(mode="after")
    def check_value(self):
        if not self.value:
            raise ValueError("Image value (file path or URL) is required")
        if self.kind == "url" and not is_url(self.value):
            raise ValueError(f"{self.value} is not a valid URL for image type 'url'!")
        return self
