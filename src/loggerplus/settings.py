"""
Engine settings.

Settings are plain mutable attributes, read once at the start of every
log call; changing one takes effect on the next call.

Option names follow Python naming, but the camelCase spellings used in
config files (``useDateTime``, ``transformTags``, ...) are accepted by
update() and from_dict().
"""

import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from .dates import DEFAULT_FORMAT


@dataclass
class Settings:
    """Options controlling the emission pipeline.

    Attributes:
        date_time_format: Token pattern for the date stamp (see dates.py)
        use_date_time: Prefix output with the current date/time
        use_tags: Prefix output with the resolved tags, each as [tag]
        use_text_transformations: Run text transformers over str arguments
        use_object_transformations: Run object transformers over copies
            of structured arguments
        transform_tags: Also run text transformers over the prefix
        disable_logging: Drop every log call without writing anything
        use_micro_templates: Substitute {{key}} call-site placeholders
        template_timeout: Seconds to wait for the stack-trace provider
    """
    date_time_format: str = DEFAULT_FORMAT
    use_date_time: bool = False
    use_tags: bool = False
    use_text_transformations: bool = False
    use_object_transformations: bool = False
    transform_tags: bool = False
    disable_logging: bool = False
    use_micro_templates: bool = False
    template_timeout: float = 5.0

    @classmethod
    def option_names(cls) -> set:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build Settings from a mapping of (camelCase or snake_case) options."""
        settings = cls()
        settings.update(**data)
        return settings

    def update(self, **options: Any) -> "Settings":
        """Set several options at once.

        Raises:
            ValueError: If an option name is not recognized
        """
        normalized = {normalize_option(key): value for key, value in options.items()}
        unknown = sorted(set(normalized) - self.option_names())
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")
        for key, value in normalized.items():
            setattr(self, key, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])([A-Z])')


def normalize_option(key: str) -> str:
    """Map 'useDateTime', 'use-date-time' or 'use_date_time' to 'use_date_time'."""
    key = key.replace('-', '_')
    return _CAMEL_BOUNDARY.sub(r'_\1', key).lower()
