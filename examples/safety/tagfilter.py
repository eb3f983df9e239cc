"""Neutralise disallowed raw HTML before handing Markdown to a renderer."""

from escapade import MarkdownConfig, create_markdown_system, filter_disallowed_tags

# Standalone
print(filter_disallowed_tags('<SCRIPT type="text/javascript">alert(1)</SCRIPT>'))

# As part of every round trip, with raw HTML blocks parsed
system = create_markdown_system(config=MarkdownConfig(html_enabled=True))
untrusted = """<div>
<iframe src="https://example.com"></iframe>
</div>

Plain text stays <em>as is</em>.
"""
print(system.round_trip(untrusted))
