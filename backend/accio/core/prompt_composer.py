"""
Prompt Composer - builds the user-turn prompt for a chat turn.

A session without code gets the generation template; a session that already
has markup or a stylesheet gets the modification template with the current
code embedded. Values are interpolated verbatim (no escaping).
"""

from enum import Enum
from typing import Optional

from ..models import Session

SYSTEM_PROMPT = "You are an expert React developer who creates beautiful, functional components."

GENERATION_TEMPLATE = """You are an expert React developer. Create a React component based on the user's request.

Requirements:
- Use modern React with hooks
- Include proper TypeScript types if needed
- Use Tailwind CSS for styling
- Make the component responsive and accessible
- Add hover effects and animations where appropriate
- Use semantic HTML elements
- Include proper ARIA attributes for accessibility

User request: {user_message}

Please provide:
1. A complete React JSX component
2. Any necessary CSS (preferably Tailwind classes, but custom CSS if needed)
3. Brief explanation of the component's features

Format your response as:
JSX:
```jsx
[Your JSX code here]
```

CSS:
```css
[Your CSS code here]
```

Explanation:
[Brief explanation of what the component does]"""

MODIFICATION_TEMPLATE = """You are an expert React developer. Modify the existing component based on the user's request.

Current component:
JSX:
```jsx
{current_markup}
```

CSS:
```css
{current_stylesheet}
```

User's modification request: {user_message}

Please provide the updated component with the requested changes. Format your response as:
JSX:
```jsx
[Updated JSX code]
```

CSS:
```css
[Updated CSS code]
```

Explanation:
[Brief explanation of the changes made]"""


class PromptKind(str, Enum):
    GENERATE = "generate"
    MODIFY = "modify"


def select_template(session: Optional[Session]) -> PromptKind:
    """Modify when the session already holds non-empty code, generate otherwise."""
    if session is not None and session.has_code:
        return PromptKind.MODIFY
    return PromptKind.GENERATE


def compose_prompt(session: Optional[Session], user_message: str) -> str:
    """Render the prompt for ``user_message`` against the session snapshot."""
    if select_template(session) is PromptKind.MODIFY:
        code = session.generated_code
        # str.format substitutes in one pass: braces inside the values stay literal
        return MODIFICATION_TEMPLATE.format(
            current_markup=code.markup or "",
            current_stylesheet=code.stylesheet or "",
            user_message=user_message,
        )
    return GENERATION_TEMPLATE.format(user_message=user_message)
