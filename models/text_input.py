from typing import Optional
from pydantic import BaseModel


class TextInput(BaseModel):
    text: str
    target_lang: str
    source_lang: Optional[str] = "en-US"
