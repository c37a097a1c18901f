"""
Component export - packages a session's current code as a zip archive.
"""

import io
import json
import re
import zipfile

from ..models import Session

README_TEMPLATE = """# {name}

This component was generated using Accio AI.

## Files
- `component.jsx` - The React component
- `styles.css` - The component styles

## Usage
Import the component and styles into your React project.

```jsx
import Component from './component.jsx';
import './styles.css';

function App() {{
  return <Component />;
}}
```
"""


def slugify(name: str) -> str:
    """Lowercase and collapse whitespace runs to dashes."""
    slug = re.sub(r"\s+", "-", name.strip().lower())
    return re.sub(r"[^\w.-]", "", slug) or "component"


def export_filename(session: Session) -> str:
    return f"{slugify(session.name)}.zip"


def build_component_zip(session: Session) -> bytes:
    """
    Build the archive: component.jsx, styles.css, package.json, README.md.

    The caller is expected to check that the session has markup.
    """
    code = session.generated_code
    package_json = {
        "name": f"{slugify(session.name)}-component",
        "version": "1.0.0",
        "description": "Generated React component",
        "main": "component.jsx",
        "dependencies": {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
        },
    }

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("component.jsx", code.markup if code else "")
        archive.writestr("styles.css", code.stylesheet if code else "")
        archive.writestr("package.json", json.dumps(package_json, indent=2))
        archive.writestr("README.md", README_TEMPLATE.format(name=session.name))
    return buffer.getvalue()
