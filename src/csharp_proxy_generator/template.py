"""Source templates for the generated proxy files."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

SectionGenerator = Callable[[], str]

# A placeholder is `<name>`. When it is alone on its line it is a block placeholder:
# every rendered line gets the placeholder's indentation, and an empty rendering removes the line.
_PLACEHOLDER_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)<(?P<block>[a-z_]+)>[ \t]*\n|<(?P<inline>[a-z_]+)>",
    re.MULTILINE,
)


class SourceTemplate:
    """An immutable source text with `<name>` placeholders."""

    def __init__(self, text: str):
        self._text = text
        self.placeholders = frozenset(
            match.group("block") or match.group("inline") for match in _PLACEHOLDER_PATTERN.finditer(text)
        )

    def render(self, sections: Sequence[tuple[str, SectionGenerator]]) -> str:
        """Render the template.

        The generators run in the given order before anything is substituted, so a generator
        may depend on side effects of the ones listed before it. Substitution is a single pass.

        Args:
            sections (Sequence[tuple[str, SectionGenerator]]): Pairs of placeholder name and generator.

        Raises:
            KeyError: If a placeholder of the template has no generator.

        Returns:
            str: The rendered source text.
        """
        rendered: dict[str, str] = {}
        for name, generator in sections:
            rendered[name] = generator()

        missing = self.placeholders.difference(rendered)
        if missing:
            raise KeyError(f"No section given for placeholder(s): {', '.join(sorted(missing))}")

        def substitute(match: re.Match[str]) -> str:
            if match.group("inline"):
                return rendered[match.group("inline")]

            value = rendered[match.group("block")]
            if not value:
                return ""

            indent = match.group("indent")
            lines = [f"{indent}{line}" if line else "" for line in value.split("\n")]
            return "\n".join(lines) + "\n"

        return _PLACEHOLDER_PATTERN.sub(substitute, self._text)


CLIENT_PROXY_TEMPLATE = SourceTemplate(
    """\
// This file is automatically generated to call the remote services of the server from C#
<usings>

namespace <namespace>
{
    public partial class <class_name> : ClientProxyBase<<service_interface>>, <service_interface>
    {
        <methods>
    }
}
"""
)

CLIENT_PROXY_EXTENSION_TEMPLATE = SourceTemplate(
    """\
// This file is part of <class_name>, you can customize it here
namespace <namespace>
{
    public partial class <class_name>
    {
    }
}
"""
)
