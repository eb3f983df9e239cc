"""Editor highlighting without serializing: blocks, HTML ranges, node classes."""

from escapade import (
    collect_decorations,
    create_markdown_system,
    find_html_blocks,
    html_literal_styler,
    split_blocks,
    table_row_styler,
)

source = """# Notes

<!-- draft -->

| key | value |
| --- | --- |
| a | 1 |

<div>raw html</div>
"""

for span in split_blocks(source):
    print(f"{span.type:<12} lines {span.start_line}-{span.end_line} {span.meta}")

for block in find_html_blocks(source.split("\n")):
    print(f"HTML type {block.type.name} at lines {block.start}-{block.end}")

system = create_markdown_system(["table_row_splitting"])
tree = system.parse(source)
for decoration in collect_decorations(tree, table_row_styler(), html_literal_styler()):
    print(decoration.index_path, decoration.css_class)
