"""Round-trip Markdown: escapes stay in prose and go away inside tables."""

from escapade import create_markdown_system

system = create_markdown_system()

source = """Regular text with \\* asterisk.

| Name | Pattern |
| --- | --- |
| glob | \\*.py |
"""

print(system.round_trip(source))
