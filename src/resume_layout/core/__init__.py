"""
resume_layout Core Package

Shared content model, schema validation and serialization used by the
rendering and pagination packages.

**DESIGN NOTES:**

1. **One page-number representation**
   - Every unit (including scalar list entries) carries its own nullable
     page number; parallel arrays exist only in the dict form.

2. **Forward-only assignments**
   - ContentUnit.assign() refuses to move a unit to an earlier page.
"""

from .models import ResumeContent, SectionKind
from .utils import serialize_content, deserialize_content

__all__ = [
    "ResumeContent",
    "SectionKind",
    "serialize_content",
    "deserialize_content",
]
