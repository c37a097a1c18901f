"""
Response Parser - pulls the component code out of free-form model output.

The model is asked to answer in this shape::

    JSX:
    ```jsx
    ...markup...
    ```

    CSS:
    ```css
    ...stylesheet...
    ```

Only the first labeled block of each kind counts. A block that is missing
yields an empty string; that is a normal result, not an error.
"""

import re
from dataclasses import dataclass
from typing import Any, Pattern

MARKUP_BLOCK = re.compile(r"JSX:\s*```jsx\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)
STYLESHEET_BLOCK = re.compile(r"CSS:\s*```css\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class ExtractedCode:
    markup: str = ""
    stylesheet: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.markup or self.stylesheet)


def _first_block(pattern: Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def extract_code_blocks(raw_text: Any) -> ExtractedCode:
    """
    Extract the markup and stylesheet blocks from model output.

    Never raises; anything that is not a string extracts to two empty fields.
    """
    if not isinstance(raw_text, str):
        return ExtractedCode()

    return ExtractedCode(
        markup=_first_block(MARKUP_BLOCK, raw_text),
        stylesheet=_first_block(STYLESHEET_BLOCK, raw_text),
    )
